# schemas/instructors_schema.py
from __future__ import annotations

from schemas.courses_schema import ACADEMIC_DEPARTMENTS
from schemas.entity import EntitySchema, QueryPreset, RecordKind
from schemas.fields import ColumnSpec, fields_from_dicts

SENIOR_INSTRUCTOR_CUTOFF = "2018-01-01"

SCHEMA = EntitySchema(
    kind=RecordKind.INSTRUCTOR,
    entity_label="Instructor",
    title="Instructors Management",
    subtitle="Manage faculty and instructor information",
    icon="👨‍🏫",
    columns=(
        ColumnSpec("id", "ID"),
        ColumnSpec("name", "Name"),
        ColumnSpec("email", "Email"),
        ColumnSpec("phone", "Phone"),
        ColumnSpec("department", "Department"),
        ColumnSpec("specialization", "Specialization"),
        ColumnSpec("hireDate", "Hire Date"),
    ),
    fields=fields_from_dicts([
        {"name": "name", "label": "Full Name", "type": "text", "required": True},
        {"name": "email", "label": "Email Address", "type": "email", "required": True},
        {"name": "phone", "label": "Phone Number", "type": "tel", "required": True},
        {"name": "department", "label": "Department", "type": "select", "required": True,
         "options": ACADEMIC_DEPARTMENTS},
        {"name": "specialization", "label": "Specialization", "type": "text", "required": True},
        {"name": "hireDate", "label": "Hire Date", "type": "date", "required": True},
    ]),
    presets=(
        QueryPreset(
            key="senior_instructors",
            label=f"Senior instructors (hired before {SENIOR_INSTRUCTOR_CUTOFF[:4]})",
            filters={"hireDate_lte": SENIOR_INSTRUCTOR_CUTOFF},
            sort_column="hireDate",
            sort_order="asc",
        ),
    ),
)
