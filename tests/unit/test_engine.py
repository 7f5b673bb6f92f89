"""Unit tests for single-value and whole-document validation."""

from __future__ import annotations

from reqcheck.validation import FloatInRangeValidator
from reqcheck.validation import FloatRange
from reqcheck.validation import IntValidator
from reqcheck.validation import NotEmptyValidator
from reqcheck.validation import StringLengthValidator
from reqcheck.validation import StringValidator
from reqcheck.validation import required_float_validators
from reqcheck.validation import required_string_validators
from reqcheck.validation import validate_map
from reqcheck.validation import validate_value


def test_validate_value_short_circuits_on_first_failure() -> None:
    errors = validate_value(None, [NotEmptyValidator("name"), StringValidator("name")])

    assert [error.code for error in errors] == ["REQUIRED_FIELD_ERROR"]


def test_validate_value_returns_empty_list_on_success() -> None:
    assert validate_value("alice", required_string_validators("name", StringLengthValidator(3, "name"))) == []


def test_type_check_guards_following_shape_validators() -> None:
    errors = validate_value("10", required_float_validators("score", FloatInRangeValidator("score", FloatRange(upper=5))))

    assert len(errors) == 1
    assert errors[0].code == "TYPE_ERROR"


def test_missing_required_field_yields_one_required_error() -> None:
    errors = validate_map({}, {"name": required_string_validators("name")})

    assert len(errors) == 1
    assert errors[0].key == "name"
    assert errors[0].code == "REQUIRED_FIELD_ERROR"


def test_unknown_document_fields_are_ignored() -> None:
    errors = validate_map({"name": "alice", "extra": object()}, {"name": required_string_validators("name")})

    assert errors == []


def test_optional_fields_are_validated_as_null() -> None:
    errors = validate_map({}, {"nickname": [StringValidator("nickname")]})

    assert [error.code for error in errors] == ["TYPE_ERROR"]


def test_errors_follow_spec_declaration_order() -> None:
    spec = {
        "zeta": required_string_validators("zeta"),
        "alpha": [NotEmptyValidator("alpha"), IntValidator("alpha")],
        "mid": required_string_validators("mid"),
    }

    errors = validate_map({"alpha": "x", "mid": "ok"}, spec)

    assert [(error.key, error.code) for error in errors] == [
        ("zeta", "REQUIRED_FIELD_ERROR"),
        ("alpha", "TYPE_ERROR"),
    ]


def test_document_is_not_mutated() -> None:
    document = {"name": 5}
    snapshot = dict(document)

    validate_map(document, {"name": required_string_validators("name"), "age": [NotEmptyValidator("age")]})

    assert document == snapshot
