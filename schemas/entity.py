# schemas/entity.py
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from core.errors import SchemaError
from schemas.fields import ColumnSpec, FieldSpec, SelectField


class RecordKind(str, Enum):
    STUDENT = "students"
    COURSE = "courses"
    INSTRUCTOR = "instructors"
    EMPLOYEE = "employees"


@dataclass(frozen=True)
class QueryPreset:
    """
    A canned filter/sort combination offered next to the search box.

    A filter value may be a callable taking today's date, for presets
    relative to the current year.
    """

    key: str
    label: str
    filters: Mapping[str, Any] = field(default_factory=dict)
    sort_column: Optional[str] = None
    sort_order: str = "asc"

    def resolve_filters(self, today: datetime.date) -> Dict[str, Any]:
        resolved = {}
        for name, value in self.filters.items():
            if callable(value):
                value = value(today)
            elif isinstance(value, (list, tuple)):
                value = list(value)
            resolved[name] = value
        return resolved


@dataclass(frozen=True)
class EntitySchema:
    kind: RecordKind
    entity_label: str
    title: str
    subtitle: str
    icon: str
    columns: Tuple[ColumnSpec, ...]
    fields: Tuple[FieldSpec, ...]
    unique_fields: Tuple[str, ...] = ()
    presets: Tuple[QueryPreset, ...] = ()

    def __post_init__(self):
        if not self.columns:
            raise SchemaError(f"{self.entity_label} schema declares no columns.")
        if not self.fields:
            raise SchemaError(f"{self.entity_label} schema declares no fields.")
        names = {f.name for f in self.fields}
        for unique in self.unique_fields:
            if unique not in names:
                raise SchemaError(f"Unique field {unique!r} is not a form field of {self.entity_label}.")

    @property
    def resource_path(self) -> str:
        return self.kind.value

    def field(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def column(self, key: str) -> ColumnSpec:
        for c in self.columns:
            if c.key == key:
                return c
        raise KeyError(key)

    @property
    def sortable_columns(self) -> Tuple[ColumnSpec, ...]:
        return tuple(c for c in self.columns if c.sortable)

    @property
    def select_fields(self) -> Tuple[SelectField, ...]:
        return tuple(f for f in self.fields if isinstance(f, SelectField))

    def preset(self, key: str) -> QueryPreset:
        for p in self.presets:
            if p.key == key:
                return p
        raise KeyError(key)

    def blank_form(self) -> Dict[str, str]:
        return {f.name: "" for f in self.fields}

    def form_from_record(self, record: Mapping[str, Any]) -> Dict[str, str]:
        """Pre-fill form text from a stored record."""
        return {f.name: f.to_form(record.get(f.name)) for f in self.fields}
