# core/errors.py
from __future__ import annotations

from typing import Optional, Sequence


class ConsoleError(Exception):
    """Base class for every error raised by the console engine."""


class SchemaError(ConsoleError, ValueError):
    """A field or column declaration is malformed."""


class ValidationError(ConsoleError):
    """One or more field-level violations. Never reaches the REST resource."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class RecordStoreError(ConsoleError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReadError(RecordStoreError):
    pass


class NetworkError(ReadError):
    """Transport failure or non-success status on a read."""


class NotFound(ReadError):
    """The requested record does not exist on the server."""


class WriteError(RecordStoreError):
    """Non-success status (or transport failure) on create/update/delete."""


class ModalStateError(ConsoleError, RuntimeError):
    """An action was requested that the current dialog state does not allow."""
