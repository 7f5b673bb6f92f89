"""Run validator chains against single values and whole request documents."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any

from reqcheck.schemas.error import FieldError
from reqcheck.validation.validators import Validator
from reqcheck.validation.values import NULL
from reqcheck.validation.values import to_value

ValidatorSpec = Mapping[str, Sequence[Validator]]


def validate_value(value: Any, validators: Sequence[Validator]) -> list[FieldError]:
    """Run ``validators`` in order and stop at the first failure."""
    tagged = to_value(value)
    for validator in validators:
        error = validator(tagged)
        if error is not None:
            return [error]
    return []


def validate_map(document: Mapping[str, Any], spec: ValidatorSpec) -> list[FieldError]:
    """Validate every field named in ``spec`` against ``document``.

    Fields are visited in the spec's declaration order. Missing fields are
    validated as null; document keys the spec does not name are ignored.
    """
    errors: list[FieldError] = []
    for key, validators in spec.items():
        errors.extend(validate_value(document.get(key, NULL), validators))
    return errors
