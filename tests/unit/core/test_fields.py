"""Unit tests for core/fields.py"""

from datetime import date, datetime

import pytest

from mdform.core.fields import clean_tags, coerce_value, form_fields, is_present, missing_required, seed_value
from mdform.core.models import FieldDefinition


NOW = datetime(2026, 1, 15, 9, 0)


def _f(**kw) -> FieldDefinition:
    return FieldDefinition(**{"name": "f", **kw})


def test_form_fields_excludes_body(fields):
    """The reserved body field never becomes a form field."""
    names = [f.name for f in form_fields(fields)]
    assert "body" not in names
    assert names == ["title", "date", "draft", "tags", "weight"]


def test_form_fields_body_and_title_only():
    """Given body and title definitions, only title is bound."""
    defs = [FieldDefinition(name="body"), FieldDefinition(name="title")]
    assert [f.name for f in form_fields(defs)] == ["title"]


@pytest.mark.parametrize("value,expected", [
    (True, True),
    ("true", True),
    (False, False),
    ("yes", False),
    ("True", False),
    (1, False),
    (None, False),
])
def test_coerce_boolean(value, expected):
    """Only True and the string 'true' coerce to True."""
    assert coerce_value(_f(type="boolean"), value) is expected


@pytest.mark.parametrize("value,expected", [
    (None, ""),
    ("Hello", "Hello"),
    (42, "42"),
])
def test_coerce_string(value, expected):
    assert coerce_value(_f(type="string"), value) == expected


@pytest.mark.parametrize("value,expected", [
    (None, []),
    ("a", []),
    (["a", " b ", "", "a", None, "  "], ["a", "b"]),
    (("x", 1), ["x", "1"]),
])
def test_coerce_string_list(value, expected):
    """List fields hold distinct, trimmed, non-empty strings."""
    assert coerce_value(_f(type="string", list=True), value) == expected


@pytest.mark.parametrize("value,expected", [
    (date(2024, 3, 1), date(2024, 3, 1)),
    (datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 8, 0)),
    ("2024-03-01", date(2024, 3, 1)),
    ("2024-03-01T08:30:00", datetime(2024, 3, 1, 8, 30)),
])
def test_coerce_date_keeps_date_like(value, expected):
    result = coerce_value(_f(type="date"), value, now=NOW)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize("value", [None, "", "not a date", 12, ["2024-01-01"]])
def test_coerce_date_falls_back_to_now(value):
    """Non-date values are replaced with the current time."""
    assert coerce_value(_f(type="date"), value, now=NOW) == NOW


def test_coerce_date_empty_when_now_disabled():
    assert coerce_value(_f(type="date"), None, date_default_now=False) is None


@pytest.mark.parametrize("value", [3, 2.5, "7", None])
def test_coerce_number_passes_through(value):
    assert coerce_value(_f(type="number"), value) == value


def test_seed_value_prefers_metadata_then_default():
    f = _f(default="fallback")
    assert seed_value(f, {"f": "stored"}) == "stored"
    assert seed_value(f, {"f": None}) == "fallback"
    assert seed_value(f, {}) == "fallback"


def test_seed_value_keeps_falsy_stored_values():
    """Stored False/0/'' are present values, not missing ones."""
    assert seed_value(_f(default=True), {"f": False}) is False
    assert seed_value(_f(default=5), {"f": 0}) == 0


def test_clean_tags_rejects_non_lists():
    assert clean_tags({"a": 1}) == []


@pytest.mark.parametrize("field,value,expected", [
    (_f(type="string"), "", False),
    (_f(type="string"), "   ", False),
    (_f(type="string"), "x", True),
    (_f(type="string", list=True), [], False),
    (_f(type="string", list=True), ["a"], True),
    (_f(type="boolean"), False, True),
    (_f(type="number"), None, False),
    (_f(type="number"), 0, True),
    (_f(type="date"), None, False),
])
def test_is_present(field, value, expected):
    assert is_present(field, value) is expected


def test_missing_required():
    defs = [_f(name="a", required=True), _f(name="b", required=True), _f(name="c")]
    assert missing_required(defs, {"a": "x", "b": "", "c": ""}) == ["b"]
