"""Primitive field validators and the builders composing them.

Every validator is a small frozen object bound to one field key. Calling it
with a ``Value`` returns ``None`` when the value passes or a ``FieldError``
describing the first problem found. Type validators accept any kind of value;
shape validators expect the kind their preceding type validator guarantees and
raise ``ValidatorSpecError`` when a spec applies them to anything else.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Protocol
from urllib.parse import urlsplit
import math
import re

from reqcheck.core.errors import new_field_error
from reqcheck.schemas.error import FieldError
from reqcheck.validation.reference_data import COUNTRY_CODES
from reqcheck.validation.reference_data import LANGUAGE_CODES
from reqcheck.validation.reference_data import TIMEZONES
from reqcheck.validation.values import Array
from reqcheck.validation.values import Bool
from reqcheck.validation.values import Float
from reqcheck.validation.values import Integer
from reqcheck.validation.values import Null
from reqcheck.validation.values import String
from reqcheck.validation.values import Value
from reqcheck.validation.values import kind_of

REQUIRED_FIELD_ERROR = "REQUIRED_FIELD_ERROR"
TYPE_ERROR = "TYPE_ERROR"
FLOAT_RANGE_ERROR = "FLOAT_RANGE_ERROR"
INT_RANGE_ERROR = "INT_RANGE_ERROR"
STRING_LENGTH_ERROR = "STRING_LENGTH_ERROR"
INVALID_LANGUAGE_ERROR = "INVALID_LANGUAGE_ERROR"
INVALID_COUNTRY_ERROR = "INVALID_COUNTRY_ERROR"
INVALID_URL_ERROR = "INVALID_URL_ERROR"
INVALID_TIMEZONE_ERROR = "INVALID_TIMEZONE_ERROR"
INVALID_DATETIME_ERROR = "INVALID_DATETIME_ERROR"

OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

_RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)
_URL_FORBIDDEN = re.compile(r"[\x00-\x20\x7f]")
_PERCENT_ESCAPE = re.compile(r"%(?![0-9a-fA-F]{2})")


class ValidatorSpecError(TypeError):
    """Raised when a validator is applied to a value kind its spec never admits."""


class FieldValidationError(ValueError):
    """Carries the field error of a validator used for parsing."""

    def __init__(self, error: FieldError) -> None:
        super().__init__(error.code)
        self.error = error


class Validator(Protocol):
    def __call__(self, value: Value) -> FieldError | None: ...


def is_object_id(raw: str) -> bool:
    return OBJECT_ID_PATTERN.fullmatch(raw) is not None


def _expect_string(validator: object, value: Value) -> str:
    if not isinstance(value, String):
        raise ValidatorSpecError(
            f"{type(validator).__name__} expects a string value, got {kind_of(value)}; "
            "put a string type validator before it"
        )
    return value.value


@dataclass(frozen=True)
class NotEmptyValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if isinstance(value, Null):
            return new_field_error(self.key, "Field is required", REQUIRED_FIELD_ERROR)
        return None


@dataclass(frozen=True)
class StringValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, String):
            return new_field_error(self.key, "Should be string", TYPE_ERROR, ["string"])
        return None


@dataclass(frozen=True)
class FloatValidator:
    """Accepts any JSON number, integral or not."""

    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, (Float, Integer)):
            return new_field_error(self.key, "Should be float", TYPE_ERROR, ["float"])
        return None


@dataclass(frozen=True)
class IntValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, Integer):
            return new_field_error(self.key, "Should be int", TYPE_ERROR, ["int"])
        return None


@dataclass(frozen=True)
class BoolValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, Bool):
            return new_field_error(self.key, "Should be bool", TYPE_ERROR, ["bool"])
        return None


@dataclass(frozen=True)
class FloatRange:
    """Inclusive bounds; ``None`` leaves that side unbounded."""

    bottom: float | None = None
    upper: float | None = None


@dataclass(frozen=True)
class IntRange:
    """Inclusive bounds; ``None`` leaves that side unbounded."""

    bottom: int | None = None
    upper: int | None = None


@dataclass(frozen=True)
class FloatInRangeValidator:
    key: str
    bounds: FloatRange = field(default_factory=FloatRange)

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, (Float, Integer)):
            raise ValidatorSpecError(f"FloatInRangeValidator expects a number, got {kind_of(value)}")
        number = float(value.value)
        if math.isnan(number) and (self.bounds.upper is not None or self.bounds.bottom is not None):
            return new_field_error(self.key, "Invalid float", FLOAT_RANGE_ERROR)
        if self.bounds.upper is not None and number > self.bounds.upper:
            return new_field_error(self.key, "Invalid float", FLOAT_RANGE_ERROR)
        if self.bounds.bottom is not None and number < self.bounds.bottom:
            return new_field_error(self.key, "Invalid float", FLOAT_RANGE_ERROR)
        return None


@dataclass(frozen=True)
class IntInRangeValidator:
    key: str
    bounds: IntRange = field(default_factory=IntRange)

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, Integer):
            raise ValidatorSpecError(f"IntInRangeValidator expects an integer, got {kind_of(value)}")
        if self.bounds.upper is not None and value.value > self.bounds.upper:
            return new_field_error(self.key, "Invalid int", INT_RANGE_ERROR)
        if self.bounds.bottom is not None and value.value < self.bounds.bottom:
            return new_field_error(self.key, "Invalid int", INT_RANGE_ERROR)
        return None


@dataclass(frozen=True)
class StringLengthValidator:
    length: int
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        text = _expect_string(self, value)
        if len(text) < self.length:
            return new_field_error(
                self.key,
                f"{self.key.upper()} should be minimum {self.length} characters",
                STRING_LENGTH_ERROR,
                [self.key, str(self.length)],
            )
        return None


@dataclass(frozen=True)
class ObjectIdValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, String) or not is_object_id(value.value):
            return new_field_error(self.key, "Should be object id", TYPE_ERROR, ["ObjectId"])
        return None


@dataclass(frozen=True)
class ArrayValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, Array):
            return new_field_error(self.key, "Should be array", TYPE_ERROR, ["array"])
        return None


@dataclass(frozen=True)
class StringArrayValidator:
    """Checks an array of strings, running ``each`` against every element.

    Element errors are re-keyed as ``<key>.<index>`` and only the first
    failing element is reported.
    """

    key: str
    each: tuple[Validator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "each", tuple(self.each))

    def __call__(self, value: Value) -> FieldError | None:
        if not isinstance(value, Array):
            return new_field_error(self.key, "Should be array", TYPE_ERROR, ["array"])

        for index, item in enumerate(value.items):
            if not isinstance(item, String):
                return new_field_error(
                    f"{self.key}.{index}", "Should be string in array", TYPE_ERROR, ["string", "array"]
                )

        for index, item in enumerate(value.items):
            for validator in self.each:
                error = validator(item)
                if error is not None:
                    return error.model_copy(update={"key": f"{self.key}.{index}"})
        return None


@dataclass(frozen=True)
class LanguageValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        text = _expect_string(self, value)
        if text not in LANGUAGE_CODES:
            return new_field_error(self.key, "Invalid language", INVALID_LANGUAGE_ERROR, [text])
        return None


@dataclass(frozen=True)
class CountryValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if _expect_string(self, value) not in COUNTRY_CODES:
            return new_field_error(self.key, "Invalid country", INVALID_COUNTRY_ERROR)
        return None


def _is_parseable_url(text: str) -> bool:
    if _URL_FORBIDDEN.search(text) or _PERCENT_ESCAPE.search(text):
        return False
    if text.startswith(":"):
        return False
    try:
        parts = urlsplit(text)
        _ = parts.port
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class URLValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if not _is_parseable_url(_expect_string(self, value)):
            return new_field_error(self.key, "Invalid url", INVALID_URL_ERROR)
        return None


@dataclass(frozen=True)
class StringContainsValidator:
    """Enum check; the error code is derived from the upper-cased key."""

    key: str
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def __call__(self, value: Value) -> FieldError | None:
        if _expect_string(self, value) not in self.values:
            return new_field_error(self.key, f"Invalid {self.key}", f"INVALID_{self.key.upper()}_ERROR")
        return None


def SexValidator(key: str) -> StringContainsValidator:
    return StringContainsValidator(key, ("male", "female"))


@dataclass(frozen=True)
class TimezoneValidator:
    key: str

    def __call__(self, value: Value) -> FieldError | None:
        if _expect_string(self, value) not in TIMEZONES:
            return new_field_error(self.key, "Invalid timezone", INVALID_TIMEZONE_ERROR)
        return None


@dataclass(frozen=True)
class DateTimeValidator:
    """Accepts an RFC3339 string or a number of Unix epoch seconds.

    ``parse`` returns the instant as an aware UTC datetime so handlers never
    need to parse the field a second time.
    """

    key: str

    def parse(self, value: Value) -> datetime:
        if isinstance(value, String):
            parsed = _parse_rfc3339(value.value)
        elif isinstance(value, (Integer, Float)):
            parsed = _parse_epoch(value.value)
        else:
            parsed = None

        if parsed is None:
            raise FieldValidationError(
                new_field_error(self.key, "Invalid datetime", INVALID_DATETIME_ERROR)
            )
        return parsed

    def __call__(self, value: Value) -> FieldError | None:
        try:
            self.parse(value)
        except FieldValidationError as exc:
            return exc.error
        return None


def _parse_rfc3339(text: str) -> datetime | None:
    match = _RFC3339_PATTERN.fullmatch(text)
    if match is None:
        return None

    normalized = text.upper()
    fraction = match.group(1)
    if fraction:
        # fromisoformat needs exactly 6 fraction digits on older interpreters
        digits = (fraction[1:] + "000000")[:6]
        normalized = normalized[: match.start(1)] + "." + digits + normalized[match.end(1) :]
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    return parsed.astimezone(timezone.utc)


def _parse_epoch(seconds: int | float) -> datetime | None:
    try:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def required_string_validators(key: str, *validators: Validator) -> list[Validator]:
    return [NotEmptyValidator(key), StringValidator(key), *validators]


def required_float_validators(key: str, *validators: Validator) -> list[Validator]:
    return [NotEmptyValidator(key), FloatValidator(key), *validators]


def required_int_validators(key: str, *validators: Validator) -> list[Validator]:
    return [NotEmptyValidator(key), IntValidator(key), *validators]


def required_bool_validators(key: str, *validators: Validator) -> list[Validator]:
    return [NotEmptyValidator(key), BoolValidator(key), *validators]


def first_type_validator(validators: Sequence[Validator]) -> Validator | None:
    """Return the first type-checking validator in a chain, if any."""
    type_validators = (StringValidator, FloatValidator, IntValidator, BoolValidator, ObjectIdValidator)
    for validator in validators:
        if isinstance(validator, type_validators):
            return validator
    return None
