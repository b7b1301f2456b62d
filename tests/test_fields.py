# tests/test_fields.py

import datetime

import pytest

from core.errors import SchemaError
from schemas.entity import EntitySchema, RecordKind
from schemas.fields import (
    ColumnSpec,
    DateField,
    FieldSpec,
    NumberField,
    SelectField,
    TextField,
    fields_from_dicts,
)
from schemas.registry import all_schemas, get_schema


def test_from_dict_builds_matching_variant():
    f = FieldSpec.from_dict({"name": "code", "label": "Code", "type": "text", "uppercase": True})
    assert isinstance(f, TextField)
    assert f.parse("  cs101 ") == "CS101"


def test_from_dict_rejects_unknown_type():
    with pytest.raises(SchemaError):
        FieldSpec.from_dict({"name": "x", "label": "X", "type": "color"})


def test_from_dict_rejects_unexpected_option():
    with pytest.raises(SchemaError):
        FieldSpec.from_dict({"name": "x", "label": "X", "type": "tel", "uppercase": True})


def test_select_without_options_is_a_schema_error():
    with pytest.raises(SchemaError):
        SelectField("department", "Department", options=())


def test_select_parse_requires_listed_option():
    f = SelectField("department", "Department", options=("Arts", "Science"))
    assert f.parse("Arts") == "Arts"
    with pytest.raises(ValueError):
        f.parse("Music")


def test_number_field_integer_mode():
    f = NumberField("credits", "Credits", integer=True)
    assert f.parse("3") == 3
    assert isinstance(f.parse("3.0"), int)
    with pytest.raises(ValueError):
        f.parse("3.5")


def test_date_field_accepts_dates_and_iso_text():
    assert DateField.parse_date("2024-02-29") == datetime.date(2024, 2, 29)
    assert DateField.parse_date(datetime.datetime(2024, 1, 2, 9, 30)) == datetime.date(2024, 1, 2)
    with pytest.raises(ValueError):
        DateField("d", "D").parse("2023-02-29")


def test_to_dict_round_trips_through_from_dict():
    declared = SelectField("position", "Position", options=("A", "B"))
    assert FieldSpec.from_dict(declared.to_dict()) == declared


def test_duplicate_field_names_rejected():
    with pytest.raises(SchemaError):
        fields_from_dicts([
            {"name": "name", "label": "Name", "type": "text"},
            {"name": "name", "label": "Other", "type": "text"},
        ])


def test_computed_column_is_never_sortable():
    column = ColumnSpec("age", "Age", sortable=True, compute=lambda r, t: 1)
    assert column.sortable is False


def test_entity_schema_requires_columns_and_fields():
    with pytest.raises(SchemaError):
        EntitySchema(RecordKind.STUDENT, "Student", "t", "s", "i", columns=(),
                     fields=(TextField("name", "Name"),))


def test_unique_field_must_be_a_form_field():
    with pytest.raises(SchemaError):
        EntitySchema(RecordKind.COURSE, "Course", "t", "s", "i",
                     columns=(ColumnSpec("id", "ID"),),
                     fields=(TextField("name", "Name"),),
                     unique_fields=("code",))


def test_registry_covers_every_kind_in_navigation_order():
    assert [s.kind for s in all_schemas()] == list(RecordKind)
    assert get_schema("courses").unique_fields == ("code",)


def test_every_form_field_has_a_column():
    for schema in all_schemas():
        keys = {c.key for c in schema.columns}
        assert {f.name for f in schema.fields} <= keys


def test_form_from_record_prefills_text():
    schema = get_schema("students")
    form = schema.form_from_record({"id": "4", "name": "Ann", "gpa": 3.2})
    assert form["name"] == "Ann"
    assert form["gpa"] == "3.2"
    assert form["email"] == ""
    assert "id" not in form


def test_employee_years_of_service_column():
    schema = get_schema("employees")
    column = schema.column("yearsOfService")
    today = datetime.date(2025, 3, 1)
    assert column.compute({"hireDate": "2015-03-01"}, today) == 10
    assert column.compute({"hireDate": "2015-03-02"}, today) == 9
    assert column.compute({"hireDate": None}, today) is None
    assert column not in schema.sortable_columns
