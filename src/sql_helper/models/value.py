"""Scalar value kinds and conversion at the driver boundary."""

import datetime
import decimal
import enum
from typing import Any


class ValueKind(str, enum.Enum):
    """Storage classes a bound or fetched value can take."""

    NULL = "NULL"
    INTEGER = "INTEGER"
    REAL = "REAL"
    TEXT = "TEXT"
    BLOB = "BLOB"


def kind_of(value: Any) -> ValueKind:
    """
    Classify a driver-ready value.

    Args:
        value: Value as accepted or returned by the driver

    Returns:
        Matching value kind

    Raises:
        TypeError: If the value has no storage class
    """
    if value is None:
        return ValueKind.NULL
    # bool is an int subclass, check it with the integers
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.REAL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, bytes):
        return ValueKind.BLOB
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def to_driver_value(value: Any) -> Any:
    """
    Convert a Python value into one the driver can bind.

    Args:
        value: Caller-supplied value

    Returns:
        None, int, float, str or bytes

    Raises:
        TypeError: If the value cannot be bound
    """
    if isinstance(value, enum.Enum):
        return to_driver_value(value.value)

    converted = value
    if isinstance(value, bool):
        converted = int(value)
    elif isinstance(value, (bytearray, memoryview)):
        converted = bytes(value)
    elif isinstance(value, decimal.Decimal):
        converted = float(value)
    # datetime is a date subclass
    elif isinstance(value, (datetime.date, datetime.time)):
        converted = value.isoformat()

    try:
        kind_of(converted)
    except TypeError:
        raise TypeError(
            f"Cannot bind value of type {type(value).__name__}"
        ) from None
    return converted


def to_driver_values(values: Any) -> tuple[Any, ...]:
    """Convert a sequence of values for positional binding."""
    return tuple(to_driver_value(value) for value in values)
