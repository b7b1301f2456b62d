# tests/test_validation.py

import datetime

import pytest

from core.errors import ValidationError
from core.validation import (
    validate_course,
    validate_employee,
    validate_instructor,
    validate_student,
    validator_for,
)
from schemas.entity import RecordKind

TODAY = datetime.date(2025, 6, 15)


def _instructor(**overrides):
    data = {
        "name": "Dr. Jane Roe",
        "email": "jane@uni.edu",
        "phone": "5550001111",
        "department": "Physics",
        "specialization": "Optics",
        "hireDate": "2015-08-01",
    }
    data.update(overrides)
    return data


def _employee(**overrides):
    data = {
        "name": "Sam Hill",
        "email": "sam@uni.edu",
        "phone": "5550002222",
        "position": "Records Manager",
        "department": "Registrar",
        "hireDate": "2019-01-07",
    }
    data.update(overrides)
    return data


# --- students ---

def test_valid_student_normalizes_values(valid_student):
    result = validate_student(valid_student)
    assert result.is_valid
    assert result.values == {
        "name": "Ann Lee",
        "email": "a@b.edu",
        "phone": "1234567890",
        "department": "Science",
        "gpa": 3.7,
        "enrollmentDate": "2023-01-01",
    }


def test_student_reports_every_violation_at_once():
    result = validate_student({"name": "Al", "email": "x", "phone": "1", "department": "",
                               "gpa": "4.5", "enrollmentDate": ""})
    assert result.errors == [
        "Name must be at least 3 characters long",
        "Please enter a valid email address",
        "Please enter a valid phone number",
        "Please select a department",
        "GPA must be between 0.0 and 4.0",
        "Please enter enrollment date",
    ]


@pytest.mark.parametrize("gpa", ["0", "0.0", "4", "4.0"])
def test_gpa_bounds_are_inclusive(valid_student, gpa):
    valid_student["gpa"] = gpa
    assert validate_student(valid_student).is_valid


@pytest.mark.parametrize("gpa", ["-0.1", "4.01", "abc", "", "nan", "inf"])
def test_gpa_out_of_range_or_not_a_number(valid_student, gpa):
    valid_student["gpa"] = gpa
    assert validate_student(valid_student).errors == ["GPA must be between 0.0 and 4.0"]


def test_name_is_trimmed_before_length_check(valid_student):
    valid_student["name"] = "  Al  "
    assert "Name must be at least 3 characters long" in validate_student(valid_student).errors


def test_department_outside_options(valid_student):
    valid_student["department"] = "Astrology"
    assert validate_student(valid_student).errors == ["Department must be one of the listed options"]


def test_invalid_enrollment_date(valid_student):
    valid_student["enrollmentDate"] = "2023-13-40"
    assert validate_student(valid_student).errors == ["Enrollment date must be a valid date (YYYY-MM-DD)"]


def test_raise_for_errors_carries_all_messages():
    result = validate_student({})
    with pytest.raises(ValidationError) as exc:
        result.raise_for_errors()
    assert exc.value.errors == result.errors
    assert len(exc.value.errors) == 6


# --- courses ---

def test_course_code_is_upper_cased(valid_course):
    result = validate_course(valid_course)
    assert result.is_valid
    assert result.values["code"] == "CS205"
    assert result.values["credits"] == 4


@pytest.mark.parametrize("code", ["C101", "CS1011", "CSABC101", "101CS", ""])
def test_course_code_format(valid_course, code):
    valid_course["code"] = code
    assert validate_course(valid_course).errors == [
        "Course code must be in format: CS101, ENG201, BUS301, etc."
    ]


@pytest.mark.parametrize("credits,ok", [("1", True), ("6", True), ("0", False), ("7", False), ("3.5", False)])
def test_course_credit_hours(valid_course, credits, ok):
    valid_course["credits"] = credits
    assert validate_course(valid_course).is_valid is ok


def test_course_short_name_and_instructor(valid_course):
    valid_course.update(name="Art", instructor="Al")
    assert validate_course(valid_course).errors == [
        "Course name must be at least 5 characters long",
        "Instructor name must be at least 3 characters long",
    ]


# --- instructors ---

def test_valid_instructor():
    result = validate_instructor(_instructor(), today=TODAY)
    assert result.is_valid
    assert result.warnings == []


def test_instructor_non_university_email_is_only_a_warning():
    result = validate_instructor(_instructor(email="jane@gmail.com"), today=TODAY)
    assert result.is_valid
    assert result.warnings == ["Email does not appear to be a university email"]


def test_instructor_name_needs_title_length():
    result = validate_instructor(_instructor(name="Jane"), today=TODAY)
    assert result.errors == ["Name must be at least 5 characters long (include title: Dr., Prof., etc.)"]


@pytest.mark.parametrize("hire_date,message", [
    ("", "Please enter hire date"),
    ("not-a-date", "Hire date must be a valid date (YYYY-MM-DD)"),
    ("2025-06-16", "Hire date cannot be in the future"),
    ("1999-12-31", "Hire date seems too old (before 2000)"),
])
def test_instructor_hire_date_rules(hire_date, message):
    result = validate_instructor(_instructor(hireDate=hire_date), today=TODAY)
    assert result.errors == [message]


def test_hire_date_today_and_floor_are_accepted():
    assert validate_instructor(_instructor(hireDate="2025-06-15"), today=TODAY).is_valid
    assert validate_instructor(_instructor(hireDate="2000-01-01"), today=TODAY).is_valid


# --- employees ---

def test_valid_employee():
    result = validate_employee(_employee(), today=TODAY)
    assert result.is_valid
    assert result.values["position"] == "Records Manager"


def test_employee_missing_position():
    result = validate_employee(_employee(position=""), today=TODAY)
    assert result.errors == ["Please select a position"]


def test_employee_future_hire_date():
    result = validate_employee(_employee(hireDate="2026-01-01"), today=TODAY)
    assert result.errors == ["Hire date cannot be in the future"]


def test_validator_for_accepts_kind_or_collection_name():
    assert validator_for(RecordKind.COURSE) is validate_course
    assert validator_for("employees") is validate_employee
    with pytest.raises(ValueError):
        validator_for("parents")


def test_lower_case_course_code_is_normalized():
    result = validate_course({"code": "cs101", "name": "Intro to Systems", "credits": "3",
                              "department": "Engineering", "instructor": "Dr. Lee"})
    assert result.is_valid
    assert result.values["code"] == "CS101"
