"""Typed statement parameters."""

from __future__ import annotations

import datetime
import decimal
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Kinds of values a parameter can carry."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    BYTES = "bytes"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    UUID = "uuid"


def infer_kind(value: Any) -> ValueKind:
    """Infer the value kind of a Python value."""
    if value is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, decimal.Decimal):
        return ValueKind.DECIMAL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BYTES
    # datetime before date: datetime is a date subclass
    if isinstance(value, datetime.datetime):
        return ValueKind.DATETIME
    if isinstance(value, datetime.date):
        return ValueKind.DATE
    if isinstance(value, datetime.time):
        return ValueKind.TIME
    if isinstance(value, uuid.UUID):
        return ValueKind.UUID
    raise TypeError(f"Cannot bind value of type {type(value).__name__}")


@dataclass(frozen=True)
class Parameter:
    """A value bound to one placeholder of a statement.

    length is only set for string values.
    """

    value: Any
    name: str
    kind: ValueKind
    length: int | None = None

    @classmethod
    def for_value(cls, value: Any, name: str, string_length: int) -> Parameter:
        """Create a parameter, inferring its kind from value."""
        kind = infer_kind(value)
        length = string_length if kind is ValueKind.STRING else None
        return cls(value=value, name=name, kind=kind, length=length)
