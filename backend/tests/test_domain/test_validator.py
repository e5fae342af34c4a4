"""Tests for is_valid and the schema-driven FieldValidator."""

import pytest
from casebook.errors import ValidationError
from casebook.models import FieldDefinition, FieldOption, FieldSchema, FieldValue
from casebook.models.validator import FieldValidator, is_valid, validate_case_fields

CATEGORIES = {"network", "malware", "phishing"}


def test_multi_select_with_one_bogus_option_is_invalid():
    fv = FieldValue(field_id="category", type="multi-select", value=["network", "bogus"])
    assert is_valid(fv, "multi-select", CATEGORIES) is False


def test_multi_select_with_known_options_is_valid():
    fv = FieldValue(field_id="category", type="multi-select", value=["network", "malware"])
    assert is_valid(fv, "multi-select", CATEGORIES) is True


def test_select_checks_membership():
    assert is_valid("high", "select", {"high", "medium", "low"}) is True
    assert is_valid("invalid-opt", "select", {"high", "medium", "low"}) is False


def test_bare_generic_sequence_accepted_for_multi_select():
    assert is_valid(("network", "phishing"), "multi-select", CATEGORIES) is True
    assert is_valid(["network", 3], "multi-select", CATEGORIES) is False


def test_type_mismatch_is_invalid_not_an_error():
    fv = FieldValue(field_id="category", type="text", value="network")
    assert is_valid(fv, "select", CATEGORIES) is False
    assert is_valid(42, "text") is False
    assert is_valid("2026-01-01T00:00:00Z", "date") is True
    assert is_valid("yesterday", "date") is False


def test_options_ignored_for_non_option_types():
    assert is_valid("anything", "text", {"x"}) is True


def _schema() -> FieldSchema:
    return FieldSchema(
        fields=[
            FieldDefinition(
                id="severity",
                type="select",
                required=True,
                options=[FieldOption(id="high"), FieldOption(id="low")],
            ),
            FieldDefinition(
                id="category",
                type="multi-select",
                options=[FieldOption(id=o) for o in sorted(CATEGORIES)],
            ),
            FieldDefinition(id="score", type="number"),
        ]
    )


def test_valid_fields_pass():
    validate_case_fields(
        _schema(),
        {
            "severity": FieldValue(field_id="severity", type="select", value="high"),
            "category": FieldValue(field_id="category", type="multi-select", value=["network"]),
            "score": FieldValue(field_id="score", type="number", value=3),
        },
    )


def test_unknown_fields_are_skipped():
    FieldValidator(_schema()).validate_case_fields(
        [
            FieldValue(field_id="severity", type="select", value="low"),
            FieldValue(field_id="not-in-schema", type="text", value="x"),
        ]
    )


def test_missing_required_field():
    with pytest.raises(ValidationError) as exc_info:
        validate_case_fields(_schema(), [])
    assert exc_info.value.context["field_id"] == "severity"


def test_unknown_option_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_case_fields(
            _schema(),
            [
                FieldValue(field_id="severity", type="select", value="high"),
                FieldValue(field_id="category", type="multi-select", value=["network", "bogus"]),
            ],
        )
    assert exc_info.value.context["option_id"] == "bogus"


def test_declared_type_mismatch_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_case_fields(
            _schema(),
            [
                FieldValue(field_id="severity", type="select", value="high"),
                FieldValue(field_id="score", type="text", value="3"),
            ],
        )
    assert exc_info.value.context["expected_type"] == "number"


def test_repository_stores_fields_the_schema_would_reject(repo):
    from casebook.models import Case

    values = {"severity": FieldValue(field_id="severity", type="select", value="critical")}
    with pytest.raises(ValidationError):
        FieldValidator(_schema()).validate_case_fields(values)

    # schema checks are the caller's job; the repository persists as given
    stored = repo.case().create("ws1", Case(title="C1", field_values=values))
    assert repo.case().get("ws1", stored.id).field_values["severity"].value == "critical"
