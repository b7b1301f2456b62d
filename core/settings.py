# core/settings.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_PAGE_SIZE_OPTIONS = (5, 10, 25, 50)


@dataclass(frozen=True)
class ApiSettings:
    base_url: str = DEFAULT_API_URL
    # seconds; None disables the timeout entirely
    timeout: Optional[float] = 10.0


@dataclass(frozen=True)
class UiSettings:
    page_size: int = 10
    page_size_options: Tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS


@dataclass(frozen=True)
class Settings:
    api: ApiSettings = field(default_factory=ApiSettings)
    ui: UiSettings = field(default_factory=UiSettings)
    log_level: str = "INFO"


def _positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return ApiSettings.timeout
    if raw.strip().lower() in ("none", "off", "0"):
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"SAS_API_TIMEOUT must be a number of seconds, got {raw!r}")
    if value < 0:
        raise ValueError("SAS_API_TIMEOUT must not be negative")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the console settings from environment variables.

    SAS_API_URL            base URL of the REST server (json-server style)
    SAS_API_TIMEOUT        request timeout in seconds ('none' disables it)
    SAS_PAGE_SIZE          initial rows per page
    SAS_PAGE_SIZE_OPTIONS  comma separated choices for the page-size picker
    SAS_LOG_LEVEL          logging level name
    """
    env = os.environ if env is None else env

    base_url = (env.get("SAS_API_URL") or DEFAULT_API_URL).strip().rstrip("/")
    timeout = _parse_timeout(env.get("SAS_API_TIMEOUT"))

    raw_options = env.get("SAS_PAGE_SIZE_OPTIONS")
    if raw_options:
        options = tuple(
            _positive_int(part.strip(), "SAS_PAGE_SIZE_OPTIONS")
            for part in raw_options.split(",")
            if part.strip()
        )
    else:
        options = DEFAULT_PAGE_SIZE_OPTIONS

    page_size = _positive_int(env.get("SAS_PAGE_SIZE") or "10", "SAS_PAGE_SIZE")
    if page_size not in options:
        options = tuple(sorted(set(options) | {page_size}))

    log_level = (env.get("SAS_LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"SAS_LOG_LEVEL is not a logging level: {log_level!r}")

    settings = Settings(
        api=ApiSettings(base_url=base_url, timeout=timeout),
        ui=UiSettings(page_size=page_size, page_size_options=options),
        log_level=log_level,
    )
    log.debug("Loaded settings: %s", settings)
    return settings
