"""Unit Tests for value kinds and driver-boundary conversion."""

import datetime
import decimal
import enum

import pytest

from sql_helper.models.value import (
    ValueKind,
    kind_of,
    to_driver_value,
    to_driver_values,
)


class Color(enum.Enum):
    RED = "red"
    BLUE = 2


class TestKindOf:
    """Test classification of driver values."""

    @pytest.mark.parametrize(
        "value, kind",
        [
            (None, ValueKind.NULL),
            (7, ValueKind.INTEGER),
            (True, ValueKind.INTEGER),
            (1.5, ValueKind.REAL),
            ("text", ValueKind.TEXT),
            (b"\x00\x01", ValueKind.BLOB),
        ],
    )
    def test_kinds(self, value, kind):
        assert kind_of(value) is kind

    def test_unsupported(self):
        with pytest.raises(TypeError):
            kind_of([1, 2])


class TestToDriverValue:
    """Test conversion of caller values before binding."""

    def test_scalars_pass_through(self):
        assert to_driver_value(None) is None
        assert to_driver_value(3) == 3
        assert to_driver_value(2.5) == 2.5
        assert to_driver_value("x") == "x"
        assert to_driver_value(b"x") == b"x"

    def test_bool_becomes_integer(self):
        assert to_driver_value(True) == 1
        assert type(to_driver_value(False)) is int

    def test_binary_buffers_become_bytes(self):
        assert to_driver_value(bytearray(b"ab")) == b"ab"
        assert to_driver_value(memoryview(b"cd")) == b"cd"

    def test_decimal_becomes_real(self):
        assert to_driver_value(decimal.Decimal("1.25")) == 1.25

    def test_temporal_values_become_iso_text(self):
        assert to_driver_value(datetime.date(2024, 1, 15)) == "2024-01-15"
        assert (
            to_driver_value(datetime.datetime(2024, 1, 15, 10, 30))
            == "2024-01-15T10:30:00"
        )
        assert to_driver_value(datetime.time(10, 30)) == "10:30:00"

    def test_enum_uses_its_value(self):
        assert to_driver_value(Color.RED) == "red"
        assert to_driver_value(Color.BLUE) == 2

    def test_unsupported(self):
        with pytest.raises(TypeError, match="Cannot bind value of type dict"):
            to_driver_value({"a": 1})

    @pytest.mark.parametrize(
        "value, kind",
        [
            (False, ValueKind.INTEGER),
            (decimal.Decimal("2.5"), ValueKind.REAL),
            (datetime.date(2024, 1, 15), ValueKind.TEXT),
            (bytearray(b"ab"), ValueKind.BLOB),
            (Color.BLUE, ValueKind.INTEGER),
            (None, ValueKind.NULL),
        ],
    )
    def test_converted_values_have_a_storage_class(self, value, kind):
        assert kind_of(to_driver_value(value)) is kind

    def test_sequence(self):
        assert to_driver_values([True, None, "a"]) == (1, None, "a")
