# schemas/employees_schema.py
from __future__ import annotations

import datetime
from typing import Any, Mapping, Optional

from schemas.entity import EntitySchema, QueryPreset, RecordKind
from schemas.fields import ColumnSpec, DateField, fields_from_dicts

EMPLOYEE_POSITIONS = (
    "Student Affairs Officer",
    "Registration Coordinator",
    "Academic Advisor",
    "Admissions Officer",
    "Financial Aid Officer",
    "Records Manager",
    "IT Support Specialist",
    "Administrative Assistant",
    "HR Manager",
    "Facilities Manager",
)

EMPLOYEE_DEPARTMENTS = (
    "Administration",
    "Admissions",
    "Student Services",
    "Financial Aid",
    "Registrar",
    "Human Resources",
    "IT Department",
    "Facilities",
    "Academic Affairs",
    "Student Affairs",
)

STUDENT_AFFAIRS_DEPARTMENTS = (
    "Student Affairs",
    "Student Services",
    "Admissions",
    "Academic Affairs",
)

SENIOR_EMPLOYEE_CUTOFF = "2020-01-01"


def years_of_service(hire_date: datetime.date, today: datetime.date) -> int:
    """Whole years between hire date and today; the anniversary counts on the day."""
    years = today.year - hire_date.year
    if (today.month, today.day) < (hire_date.month, hire_date.day):
        years -= 1
    return years


def _service_years(record: Mapping[str, Any], today: datetime.date) -> Optional[int]:
    try:
        hired = DateField.parse_date(record.get("hireDate"))
    except (TypeError, ValueError):
        return None
    return years_of_service(hired, today)


def start_of_year(today: datetime.date) -> str:
    """First day of the current year, the cutoff for the new-employees preset."""
    return datetime.date(today.year, 1, 1).isoformat()


SCHEMA = EntitySchema(
    kind=RecordKind.EMPLOYEE,
    entity_label="Employee",
    title="Employees Management",
    subtitle="Manage staff and employee records",
    icon="👔",
    columns=(
        ColumnSpec("id", "ID"),
        ColumnSpec("name", "Name"),
        ColumnSpec("email", "Email"),
        ColumnSpec("phone", "Phone"),
        ColumnSpec("position", "Position"),
        ColumnSpec("department", "Department"),
        ColumnSpec("hireDate", "Hire Date"),
        ColumnSpec("yearsOfService", "Years of Service", compute=_service_years),
    ),
    fields=fields_from_dicts([
        {"name": "name", "label": "Full Name", "type": "text", "required": True},
        {"name": "email", "label": "Email Address", "type": "email", "required": True},
        {"name": "phone", "label": "Phone Number", "type": "tel", "required": True},
        {"name": "position", "label": "Position", "type": "select", "required": True,
         "options": EMPLOYEE_POSITIONS},
        {"name": "department", "label": "Department", "type": "select", "required": True,
         "options": EMPLOYEE_DEPARTMENTS},
        {"name": "hireDate", "label": "Hire Date", "type": "date", "required": True},
    ]),
    presets=(
        QueryPreset(
            key="new_employees",
            label="New employees (hired this year)",
            filters={"hireDate_gte": start_of_year},
            sort_column="hireDate",
            sort_order="desc",
        ),
        QueryPreset(
            key="senior_employees",
            label=f"Senior employees (hired before {SENIOR_EMPLOYEE_CUTOFF[:4]})",
            filters={"hireDate_lte": SENIOR_EMPLOYEE_CUTOFF},
            sort_column="hireDate",
            sort_order="asc",
        ),
        QueryPreset(
            key="student_affairs_staff",
            label="Student affairs staff",
            filters={"department": list(STUDENT_AFFAIRS_DEPARTMENTS)},
        ),
    ),
)
