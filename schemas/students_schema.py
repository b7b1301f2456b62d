# schemas/students_schema.py
from __future__ import annotations

from schemas.entity import EntitySchema, QueryPreset, RecordKind
from schemas.fields import ColumnSpec, fields_from_dicts

STUDENT_DEPARTMENTS = (
    "Computer Science",
    "Engineering",
    "Business",
    "Medicine",
    "Arts",
    "Science",
)

HONOR_GPA_FLOOR = 3.5

SCHEMA = EntitySchema(
    kind=RecordKind.STUDENT,
    entity_label="Student",
    title="Students Management",
    subtitle="View, add, edit, and manage all student records",
    icon="👨‍🎓",
    columns=(
        ColumnSpec("id", "ID"),
        ColumnSpec("name", "Name"),
        ColumnSpec("email", "Email"),
        ColumnSpec("phone", "Phone"),
        ColumnSpec("department", "Department"),
        ColumnSpec("gpa", "GPA"),
        ColumnSpec("enrollmentDate", "Enrollment Date"),
    ),
    fields=fields_from_dicts([
        # 1) Identity
        {"name": "name", "label": "Full Name", "type": "text", "required": True},
        {"name": "email", "label": "Email Address", "type": "email", "required": True},
        {"name": "phone", "label": "Phone Number", "type": "tel", "required": True},

        # 2) Academic standing
        {"name": "department", "label": "Department", "type": "select", "required": True,
         "options": STUDENT_DEPARTMENTS},
        {"name": "gpa", "label": "GPA (0.0 - 4.0)", "type": "number", "required": True},
        {"name": "enrollmentDate", "label": "Enrollment Date", "type": "date", "required": True},
    ]),
    presets=(
        QueryPreset(
            key="honor_students",
            label=f"Honor students (GPA ≥ {HONOR_GPA_FLOOR})",
            filters={"gpa_gte": HONOR_GPA_FLOOR},
            sort_column="gpa",
            sort_order="desc",
        ),
    ),
)
