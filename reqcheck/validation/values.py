"""Tagged representation of untyped JSON-like request values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Union


@dataclass(frozen=True)
class Null:
    """An absent value: JSON ``null`` or a missing field."""


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Float:
    value: float


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Array:
    items: tuple[Value, ...]


@dataclass(frozen=True)
class Object:
    fields: tuple[tuple[str, Value], ...]


Value = Union[Null, String, Integer, Float, Bool, Array, Object]
Number = Union[Integer, Float]

NULL = Null()

_VALUE_TYPES = (Null, String, Integer, Float, Bool, Array, Object)


def to_value(raw: Any) -> Value:
    """Convert decoded JSON data into a ``Value``.

    Values that are already tagged pass through unchanged. Anything that is not
    a JSON-compatible Python type raises ``TypeError``.
    """
    if isinstance(raw, _VALUE_TYPES):
        return raw
    if raw is None:
        return NULL
    # bool is a subclass of int and must be checked first
    if isinstance(raw, bool):
        return Bool(raw)
    if isinstance(raw, int):
        return Integer(raw)
    if isinstance(raw, float):
        return Float(raw)
    if isinstance(raw, str):
        return String(raw)
    if isinstance(raw, (list, tuple)):
        return Array(tuple(to_value(item) for item in raw))
    if isinstance(raw, Mapping):
        return Object(tuple((str(key), to_value(item)) for key, item in raw.items()))
    raise TypeError(f"Unsupported value type: {type(raw).__name__}")


def kind_of(value: Value) -> str:
    """Short lowercase name of the value's kind, used in diagnostics."""
    return type(value).__name__.lower()
