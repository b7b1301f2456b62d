# core/validation.py
"""
Per-kind validation of form input before any write.

Every validator takes the raw mapping a form delivers (strings, possibly
missing keys) and returns a ValidationResult holding all violations at once,
advisory warnings that do not block the write, and the normalized values
that would be sent to the server.
"""
from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from core.errors import ValidationError
from schemas.courses_schema import SCHEMA as COURSE_SCHEMA
from schemas.employees_schema import SCHEMA as EMPLOYEE_SCHEMA
from schemas.entity import EntitySchema, RecordKind
from schemas.fields import EMAIL_RE, DateField
from schemas.instructors_schema import SCHEMA as INSTRUCTOR_SCHEMA
from schemas.students_schema import SCHEMA as STUDENT_SCHEMA

log = logging.getLogger(__name__)

COURSE_CODE_RE = re.compile(r"^[A-Z]{2,4}\d{3}$")
HIRE_DATE_FLOOR = datetime.date(2000, 1, 1)
MIN_PHONE_LENGTH = 10
INSTITUTIONAL_DOMAIN = ".edu"

GPA_RANGE = (0.0, 4.0)
CREDIT_RANGE = (1, 6)


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    values: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


Validator = Callable[..., ValidationResult]


# ────────────────────────────────────────────────────────────────────────────────
# Rule helpers
# ────────────────────────────────────────────────────────────────────────────────

def _raw(data: Mapping[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    return str(value).strip()


def _min_length(result: ValidationResult, schema: EntitySchema, data: Mapping[str, Any],
                name: str, minimum: int, message: str) -> None:
    text = _raw(data, name)
    if len(text) < minimum:
        result.errors.append(message)
        return
    result.values[name] = schema.field(name).parse(text)


def _email(result: ValidationResult, schema: EntitySchema, data: Mapping[str, Any],
           name: str = "email", advisory: bool = False) -> None:
    text = _raw(data, name)
    if not EMAIL_RE.fullmatch(text):
        result.errors.append("Please enter a valid email address")
        return
    result.values[name] = schema.field(name).parse(text)
    if advisory:
        domain = text.rsplit("@", 1)[-1].lower()
        if INSTITUTIONAL_DOMAIN not in domain:
            log.info("Email %s is outside the institutional domain", text)
            result.warnings.append("Email does not appear to be a university email")


def _phone(result: ValidationResult, schema: EntitySchema, data: Mapping[str, Any],
           name: str = "phone") -> None:
    text = _raw(data, name)
    if len(text) < MIN_PHONE_LENGTH:
        result.errors.append("Please enter a valid phone number")
        return
    result.values[name] = schema.field(name).parse(text)


def _select(result: ValidationResult, schema: EntitySchema, data: Mapping[str, Any],
            name: str, message: str) -> None:
    text = _raw(data, name)
    if not text:
        result.errors.append(message)
        return
    try:
        result.values[name] = schema.field(name).parse(text)
    except ValueError:
        result.errors.append(f"{schema.field(name).label} must be one of the listed options")


def _number_in_range(result: ValidationResult, schema: EntitySchema, data: Mapping[str, Any],
                     name: str, bounds: tuple, message: str) -> None:
    lo, hi = bounds
    try:
        value = schema.field(name).parse(_raw(data, name))
    except ValueError:
        result.errors.append(message)
        return
    if value < lo or value > hi:
        result.errors.append(message)
        return
    result.values[name] = value


def _enrollment_date(result: ValidationResult, data: Mapping[str, Any],
                     name: str = "enrollmentDate") -> None:
    text = _raw(data, name)
    if not text:
        result.errors.append("Please enter enrollment date")
        return
    try:
        result.values[name] = DateField.parse_date(text).isoformat()
    except ValueError:
        result.errors.append("Enrollment date must be a valid date (YYYY-MM-DD)")


def _hire_date(result: ValidationResult, data: Mapping[str, Any], today: datetime.date,
               name: str = "hireDate") -> None:
    text = _raw(data, name)
    if not text:
        result.errors.append("Please enter hire date")
        return
    try:
        hired = DateField.parse_date(text)
    except ValueError:
        result.errors.append("Hire date must be a valid date (YYYY-MM-DD)")
        return
    ok = True
    if hired > today:
        result.errors.append("Hire date cannot be in the future")
        ok = False
    if hired < HIRE_DATE_FLOOR:
        result.errors.append("Hire date seems too old (before 2000)")
        ok = False
    if ok:
        result.values[name] = hired.isoformat()


def _course_code(result: ValidationResult, schema: EntitySchema, data: Mapping[str, Any],
                 name: str = "code") -> None:
    code = _raw(data, name).upper()
    if not COURSE_CODE_RE.fullmatch(code):
        result.errors.append("Course code must be in format: CS101, ENG201, BUS301, etc.")
        return
    result.values[name] = schema.field(name).parse(code)


# ────────────────────────────────────────────────────────────────────────────────
# Per-kind validators
# ────────────────────────────────────────────────────────────────────────────────

def validate_student(data: Mapping[str, Any], *, today: Optional[datetime.date] = None) -> ValidationResult:
    s = STUDENT_SCHEMA
    result = ValidationResult()
    _min_length(result, s, data, "name", 3, "Name must be at least 3 characters long")
    _email(result, s, data)
    _phone(result, s, data)
    _select(result, s, data, "department", "Please select a department")
    _number_in_range(result, s, data, "gpa", GPA_RANGE, "GPA must be between 0.0 and 4.0")
    _enrollment_date(result, data)
    return result


def validate_course(data: Mapping[str, Any], *, today: Optional[datetime.date] = None) -> ValidationResult:
    s = COURSE_SCHEMA
    result = ValidationResult()
    _course_code(result, s, data)
    _min_length(result, s, data, "name", 5, "Course name must be at least 5 characters long")
    _number_in_range(result, s, data, "credits", CREDIT_RANGE, "Credit hours must be between 1 and 6")
    _select(result, s, data, "department", "Please select a department")
    _min_length(result, s, data, "instructor", 3, "Instructor name must be at least 3 characters long")
    return result


def validate_instructor(data: Mapping[str, Any], *, today: Optional[datetime.date] = None) -> ValidationResult:
    s = INSTRUCTOR_SCHEMA
    today = today or datetime.date.today()
    result = ValidationResult()
    _min_length(result, s, data, "name", 5,
                "Name must be at least 5 characters long (include title: Dr., Prof., etc.)")
    _email(result, s, data, advisory=True)
    _phone(result, s, data)
    _select(result, s, data, "department", "Please select a department")
    _min_length(result, s, data, "specialization", 3, "Specialization must be at least 3 characters long")
    _hire_date(result, data, today)
    return result


def validate_employee(data: Mapping[str, Any], *, today: Optional[datetime.date] = None) -> ValidationResult:
    s = EMPLOYEE_SCHEMA
    today = today or datetime.date.today()
    result = ValidationResult()
    _min_length(result, s, data, "name", 3, "Name must be at least 3 characters long")
    _email(result, s, data, advisory=True)
    _phone(result, s, data)
    _select(result, s, data, "position", "Please select a position")
    _select(result, s, data, "department", "Please select a department")
    _hire_date(result, data, today)
    return result


VALIDATORS: Dict[RecordKind, Validator] = {
    RecordKind.STUDENT: validate_student,
    RecordKind.COURSE: validate_course,
    RecordKind.INSTRUCTOR: validate_instructor,
    RecordKind.EMPLOYEE: validate_employee,
}


def validator_for(kind: Union[RecordKind, str]) -> Validator:
    return VALIDATORS[RecordKind(kind)]
