from datetime import date

import pytest

from app.backend.core.errors import NoDataError, ValidationError
from app.backend.services.sanitize import (
    coerce_bool,
    normalize_due_date,
    sanitize_text_field,
    sanitize_textarea_field,
)
from app.backend.services.task_service import validate_create, validate_update


def test_text_field_strips_markup_and_collapses_whitespace():
    assert sanitize_text_field("  <b>Buy</b>\n  milk\t<script>alert(1)</script> ") == "Buy milk"


def test_text_field_keeps_lone_angle_brackets():
    assert sanitize_text_field("5 < 6 and 7 > 3") == "5 < 6 and 7 > 3"


def test_textarea_field_keeps_line_breaks():
    raw = "first   line <i>x</i>\r\n\tsecond line  \n"

    assert sanitize_textarea_field(raw) == "first line x\nsecond line"


def test_text_field_rejects_structured_values():
    with pytest.raises(ValueError):
        sanitize_text_field({"nested": True})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2026-03-01", date(2026, 3, 1)),
        (" 2026-03-01 ", date(2026, 3, 1)),
        ("2026-03-01T09:30:00Z", date(2026, 3, 1)),
        ("", None),
        (None, None),
    ],
)
def test_normalize_due_date(raw, expected):
    assert normalize_due_date(raw) == expected


@pytest.mark.parametrize("raw", ["tomorrow", "2026-13-01", "03/01/2026"])
def test_normalize_due_date_rejects_garbage(raw):
    with pytest.raises(ValueError):
        normalize_due_date(raw)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(True, True), (False, False), (1, True), (0, False), ("true", True), ("off", False), ("1", True)],
)
def test_coerce_bool(raw, expected):
    assert coerce_bool(raw) is expected


def test_coerce_bool_rejects_unknown_strings():
    with pytest.raises(ValueError):
        coerce_bool("maybe")


def test_validate_create_applies_defaults():
    data = validate_create({"text": "Buy milk"})

    assert data.text == "Buy milk"
    assert data.description == ""
    assert data.due_date is None
    assert data.category == "general"
    assert data.completed is False


def test_validate_create_normalizes_empty_category():
    assert validate_create({"text": "x", "category": "   "}).category == "general"


def test_validate_create_requires_text():
    with pytest.raises(ValidationError) as excinfo:
        validate_create({"description": "no title"})

    assert excinfo.value.status_code == 400
    assert excinfo.value.data["field"] == "text"
    assert "required" in excinfo.value.message


def test_validate_create_rejects_text_that_sanitizes_to_nothing():
    with pytest.raises(ValidationError, match="text must not be empty"):
        validate_create({"text": "<br/>  "})


def test_validate_create_rejects_long_category():
    with pytest.raises(ValidationError, match="category"):
        validate_create({"text": "x", "category": "c" * 51})


def test_validate_create_rejects_non_object_body():
    with pytest.raises(ValidationError) as excinfo:
        validate_create(["text"])

    assert excinfo.value.code == "invalid_json"


def test_validate_update_keeps_only_sent_fields():
    assert validate_update({"completed": True, "unknown": 1}) == {"completed": True}


def test_validate_update_empty_due_date_clears():
    assert validate_update({"due_date": ""}) == {"due_date": None}
    assert validate_update({"due_date": None}) == {"due_date": None}


def test_validate_update_null_fields_count_as_absent():
    with pytest.raises(NoDataError):
        validate_update({"text": None, "completed": None})


def test_validate_update_without_recognized_fields():
    with pytest.raises(NoDataError) as excinfo:
        validate_update({"foo": "bar"})

    assert excinfo.value.code == "no_data"
    assert excinfo.value.status_code == 400
