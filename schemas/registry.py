# schemas/registry.py
from __future__ import annotations

from typing import Dict, Tuple, Union

from schemas.courses_schema import SCHEMA as COURSE_SCHEMA
from schemas.employees_schema import SCHEMA as EMPLOYEE_SCHEMA
from schemas.entity import EntitySchema, RecordKind
from schemas.instructors_schema import SCHEMA as INSTRUCTOR_SCHEMA
from schemas.students_schema import SCHEMA as STUDENT_SCHEMA

# Navigation order in the sidebar follows this mapping.
_SCHEMAS: Dict[RecordKind, EntitySchema] = {
    RecordKind.STUDENT: STUDENT_SCHEMA,
    RecordKind.COURSE: COURSE_SCHEMA,
    RecordKind.INSTRUCTOR: INSTRUCTOR_SCHEMA,
    RecordKind.EMPLOYEE: EMPLOYEE_SCHEMA,
}


def get_schema(kind: Union[RecordKind, str]) -> EntitySchema:
    """Return the schema for a record kind; plain collection names are accepted."""
    return _SCHEMAS[RecordKind(kind)]


def all_schemas() -> Tuple[EntitySchema, ...]:
    return tuple(_SCHEMAS.values())
