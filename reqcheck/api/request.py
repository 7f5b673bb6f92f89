"""Bridge HTTP requests to the validation engine and back to service errors."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any
import json
import logging

from fastapi import Request
from fastapi import status

from reqcheck.api.params import bool_param
from reqcheck.api.params import float_param
from reqcheck.api.params import int_param
from reqcheck.api.params import object_id_param
from reqcheck.api.params import string_param
from reqcheck.core.errors import bad_request
from reqcheck.core.errors import new_service_error
from reqcheck.validation.engine import ValidatorSpec
from reqcheck.validation.engine import validate_map
from reqcheck.validation.validators import BoolValidator
from reqcheck.validation.validators import FloatValidator
from reqcheck.validation.validators import IntValidator
from reqcheck.validation.validators import ObjectIdValidator
from reqcheck.validation.validators import first_type_validator

logger = logging.getLogger(__name__)

Document = dict[str, Any]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


async def decode_body(request: Request) -> Document:
    """Parse the request body as a JSON object.

    Malformed JSON and non-object payloads both surface as the generic
    ``INVALID_REQUEST`` error; the parser's own message is only logged.
    """
    raw = await request.body()
    try:
        body = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        logger.debug("Rejected malformed JSON body: %s", exc)
        raise bad_request() from exc

    if not isinstance(body, dict):
        logger.debug("Rejected JSON body of type %s", type(body).__name__)
        raise bad_request()
    return body


def validate_body(document: Mapping[str, Any], spec: ValidatorSpec) -> Document:
    """Return ``document`` unchanged when valid, else raise a 400 service error."""
    errors = validate_map(document, spec)
    if errors:
        raise new_service_error(status.HTTP_400_BAD_REQUEST, errors)
    return dict(document)


async def get_validated_body(request: Request, spec: ValidatorSpec) -> Document:
    body = await decode_body(request)
    return validate_body(body, spec)


def _read_param(request: Request, name: str, validators) -> Any:
    type_validator = first_type_validator(validators)
    if isinstance(type_validator, IntValidator):
        return int_param(request, name)
    if isinstance(type_validator, FloatValidator):
        return float_param(request, name)
    if isinstance(type_validator, BoolValidator):
        return bool_param(request, name)
    if isinstance(type_validator, ObjectIdValidator):
        return object_id_param(request, name)
    return string_param(request, name)


def validate_url_parameters(request: Request, spec: ValidatorSpec) -> Document:
    """Read the fields named in ``spec`` from path/query parameters and validate them.

    Each field is read with the extractor matching the first type validator of
    its chain, so missing and malformed parameters both arrive as null.
    """
    document = {name: _read_param(request, name, validators) for name, validators in spec.items()}
    return validate_body(document, spec)


def validated_body(spec: ValidatorSpec) -> Callable[[Request], Awaitable[Document]]:
    """FastAPI dependency returning the validated JSON body."""

    async def dependency(request: Request) -> Document:
        return await get_validated_body(request, spec)

    return dependency


def validated_query(spec: ValidatorSpec) -> Callable[[Request], Document]:
    """FastAPI dependency returning validated URL parameters."""

    def dependency(request: Request) -> Document:
        return validate_url_parameters(request, spec)

    return dependency
