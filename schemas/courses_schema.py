# schemas/courses_schema.py
from __future__ import annotations

from schemas.entity import EntitySchema, RecordKind
from schemas.fields import ColumnSpec, fields_from_dicts

ACADEMIC_DEPARTMENTS = (
    "Computer Science",
    "Engineering",
    "Business",
    "Medicine",
    "Arts",
    "Science",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
)

SCHEMA = EntitySchema(
    kind=RecordKind.COURSE,
    entity_label="Course",
    title="Courses Management",
    subtitle="Manage course catalog and course information",
    icon="📚",
    columns=(
        ColumnSpec("id", "ID"),
        ColumnSpec("code", "Course Code"),
        ColumnSpec("name", "Course Name"),
        ColumnSpec("credits", "Credits"),
        ColumnSpec("department", "Department"),
        ColumnSpec("instructor", "Instructor"),
    ),
    fields=fields_from_dicts([
        {"name": "code", "label": "Course Code", "type": "text", "required": True, "uppercase": True},
        {"name": "name", "label": "Course Name", "type": "text", "required": True},
        {"name": "credits", "label": "Credit Hours", "type": "number", "required": True, "integer": True},
        {"name": "department", "label": "Department", "type": "select", "required": True,
         "options": ACADEMIC_DEPARTMENTS},
        {"name": "instructor", "label": "Instructor Name", "type": "text", "required": True},
    ]),
    # The REST server has no unique constraints; checked before create only.
    unique_fields=("code",),
)
