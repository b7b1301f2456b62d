# schemas/fields.py
"""
Field and column declarations for record forms and tables.

A FieldSpec is a tagged union keyed by its ``type``. Each variant knows how
to turn the raw string a form delivers into the JSON value that is written
(``parse``) and how to turn a stored value back into form text (``to_form``).
Unknown types and select fields without options are rejected when the
declaration is built, not when a record is submitted.
"""
from __future__ import annotations

import datetime
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Type

from core.errors import SchemaError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _clean(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


# ────────────────────────────────────────────────────────────────────────────────
# Columns
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ColumnSpec:
    key: str
    label: str
    sortable: bool = True
    # derived display columns: compute(record, today) -> value
    compute: Optional[Callable[[Mapping[str, Any], datetime.date], Any]] = None

    def __post_init__(self):
        if not self.key:
            raise SchemaError("Column key must not be empty.")
        if self.compute is not None and self.sortable:
            # the server cannot sort on a value it never stores
            object.__setattr__(self, "sortable", False)


# ────────────────────────────────────────────────────────────────────────────────
# Field variants
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    required: bool = True

    type: ClassVar[str] = ""
    _registry: ClassVar[Dict[str, Type["FieldSpec"]]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.type:
            FieldSpec._registry[cls.type] = cls

    def __post_init__(self):
        if not self.name:
            raise SchemaError("Field name must not be empty.")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldSpec":
        """Build the variant named by ``data['type']``."""
        ftype = data.get("type")
        variant = cls._registry.get(ftype)
        if variant is None:
            raise SchemaError(f"Unknown field type {ftype!r} for field {data.get('name')!r}.")
        kwargs = {k: v for k, v in data.items() if k != "type"}
        if "options" in kwargs and kwargs["options"] is not None:
            kwargs["options"] = tuple(kwargs["options"])
        try:
            return variant(**kwargs)
        except TypeError as e:
            raise SchemaError(f"Invalid declaration for {ftype} field {data.get('name')!r}: {e}")

    def to_dict(self) -> Dict[str, Any]:
        out = {"name": self.name, "label": self.label, "type": self.type, "required": self.required}
        return out

    def is_blank(self, raw: Any) -> bool:
        return _clean(raw) == ""

    def parse(self, raw: Any) -> Any:
        return _clean(raw)

    def to_form(self, value: Any) -> str:
        return "" if value is None else str(value)


@dataclass(frozen=True)
class TextField(FieldSpec):
    uppercase: bool = False
    type: ClassVar[str] = "text"

    def parse(self, raw: Any) -> str:
        value = _clean(raw)
        return value.upper() if self.uppercase else value

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["uppercase"] = self.uppercase
        return out


@dataclass(frozen=True)
class EmailField(FieldSpec):
    type: ClassVar[str] = "email"

    def parse(self, raw: Any) -> str:
        value = _clean(raw)
        if not EMAIL_RE.fullmatch(value):
            raise ValueError(f"{value!r} is not an email address")
        return value


@dataclass(frozen=True)
class TelField(FieldSpec):
    type: ClassVar[str] = "tel"


@dataclass(frozen=True)
class NumberField(FieldSpec):
    integer: bool = False
    type: ClassVar[str] = "number"

    def parse(self, raw: Any) -> float | int:
        text = _clean(raw)
        value = float(text)
        if not math.isfinite(value):
            raise ValueError(f"{text!r} is not a finite number")
        if self.integer:
            if not value.is_integer():
                raise ValueError(f"{text!r} is not a whole number")
            return int(value)
        return value

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["integer"] = self.integer
        return out


@dataclass(frozen=True)
class DateField(FieldSpec):
    type: ClassVar[str] = "date"

    def parse(self, raw: Any) -> str:
        return self.parse_date(raw).isoformat()

    @staticmethod
    def parse_date(raw: Any) -> datetime.date:
        if isinstance(raw, datetime.datetime):
            return raw.date()
        if isinstance(raw, datetime.date):
            return raw
        return datetime.date.fromisoformat(_clean(raw))


@dataclass(frozen=True)
class SelectField(FieldSpec):
    options: Tuple[str, ...] = field(default_factory=tuple)
    type: ClassVar[str] = "select"

    def __post_init__(self):
        super().__post_init__()
        if not self.options:
            raise SchemaError(f"Select field {self.name!r} needs at least one option.")

    def parse(self, raw: Any) -> str:
        value = _clean(raw)
        if value not in self.options:
            raise ValueError(f"{value!r} is not one of the options for {self.name}")
        return value

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["options"] = list(self.options)
        return out


FIELD_TYPES: Tuple[str, ...] = tuple(FieldSpec._registry)


def fields_from_dicts(items: Sequence[Mapping[str, Any]]) -> Tuple[FieldSpec, ...]:
    fields = tuple(FieldSpec.from_dict(item) for item in items)
    names = [f.name for f in fields]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise SchemaError(f"Duplicate field names: {', '.join(dupes)}")
    return fields
