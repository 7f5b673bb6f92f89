"""Declarative field validation for loosely-typed request documents."""

from reqcheck.validation.engine import ValidatorSpec
from reqcheck.validation.engine import validate_map
from reqcheck.validation.engine import validate_value
from reqcheck.validation.validators import ArrayValidator
from reqcheck.validation.validators import BoolValidator
from reqcheck.validation.validators import CountryValidator
from reqcheck.validation.validators import DateTimeValidator
from reqcheck.validation.validators import FieldValidationError
from reqcheck.validation.validators import FloatInRangeValidator
from reqcheck.validation.validators import FloatRange
from reqcheck.validation.validators import FloatValidator
from reqcheck.validation.validators import IntInRangeValidator
from reqcheck.validation.validators import IntRange
from reqcheck.validation.validators import IntValidator
from reqcheck.validation.validators import LanguageValidator
from reqcheck.validation.validators import NotEmptyValidator
from reqcheck.validation.validators import ObjectIdValidator
from reqcheck.validation.validators import SexValidator
from reqcheck.validation.validators import StringArrayValidator
from reqcheck.validation.validators import StringContainsValidator
from reqcheck.validation.validators import StringLengthValidator
from reqcheck.validation.validators import StringValidator
from reqcheck.validation.validators import TimezoneValidator
from reqcheck.validation.validators import URLValidator
from reqcheck.validation.validators import Validator
from reqcheck.validation.validators import ValidatorSpecError
from reqcheck.validation.validators import required_bool_validators
from reqcheck.validation.validators import required_float_validators
from reqcheck.validation.validators import required_int_validators
from reqcheck.validation.validators import required_string_validators

__all__ = [
    "ArrayValidator",
    "BoolValidator",
    "CountryValidator",
    "DateTimeValidator",
    "FieldValidationError",
    "FloatInRangeValidator",
    "FloatRange",
    "FloatValidator",
    "IntInRangeValidator",
    "IntRange",
    "IntValidator",
    "LanguageValidator",
    "NotEmptyValidator",
    "ObjectIdValidator",
    "SexValidator",
    "StringArrayValidator",
    "StringContainsValidator",
    "StringLengthValidator",
    "StringValidator",
    "TimezoneValidator",
    "URLValidator",
    "Validator",
    "ValidatorSpec",
    "ValidatorSpecError",
    "required_bool_validators",
    "required_float_validators",
    "required_int_validators",
    "required_string_validators",
    "validate_map",
    "validate_value",
]
