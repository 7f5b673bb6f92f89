"""Typed readers for single path or query parameters.

Each reader returns ``None`` both when the parameter is missing and when it
cannot be read as the requested type.
"""

from __future__ import annotations

import re

from starlette.requests import Request

from reqcheck.validation.validators import is_object_id

_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?((\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|inf|infinity)", re.IGNORECASE
)


def string_param(request: Request, name: str) -> str | None:
    """Path parameter first, then query string; empty strings count as absent."""
    value = request.path_params.get(name)
    if value in (None, ""):
        value = request.query_params.get(name)
    if value in (None, ""):
        return None
    return str(value)


def int_param(request: Request, name: str) -> int | None:
    raw = string_param(request, name)
    if raw is None or _INT_PATTERN.fullmatch(raw) is None:
        return None
    return int(raw)


def float_param(request: Request, name: str) -> float | None:
    raw = string_param(request, name)
    if raw is None or _FLOAT_PATTERN.fullmatch(raw) is None:
        return None
    return float(raw)


def bool_param(request: Request, name: str) -> bool | None:
    raw = string_param(request, name)
    if raw is None:
        return None
    normalized = raw.lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    return None


def object_id_param(request: Request, name: str) -> str | None:
    raw = string_param(request, name)
    if raw is None or not is_object_id(raw):
        return None
    return raw
