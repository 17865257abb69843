"""Tests for orjson serialization of result rows."""

import base64

import orjson

from sql_helper.models.query import QueryResult
from sql_helper.utils import (
    convert_rows_to_json_safe,
    convert_value_to_json_safe,
    dumps,
)


class TestValueConversion:
    """Test conversion of SQLite values to JSON-safe values."""

    def test_basic_types(self):
        assert convert_value_to_json_safe(42) == 42
        assert convert_value_to_json_safe(3.5) == 3.5
        assert convert_value_to_json_safe("x") == "x"
        assert convert_value_to_json_safe(None) is None

    def test_utf8_blob_decodes_to_text(self):
        assert convert_value_to_json_safe(b"hello") == "hello"

    def test_binary_blob_becomes_base64(self):
        blob = b"\xff\xfe\x00"
        expected = base64.b64encode(blob).decode("ascii")
        assert convert_value_to_json_safe(blob) == expected

    def test_unserializable_falls_back_to_str(self):
        class Opaque:
            def __str__(self):
                return "opaque"

        assert convert_value_to_json_safe(Opaque()) == "opaque"

    def test_rows(self):
        rows = [[1, b"a"], [None, "b"]]
        assert convert_rows_to_json_safe(rows) == [[1, "a"], [None, "b"]]


class TestQueryResultSerialization:
    """Test QueryResult helpers built on the serializer."""

    def _result(self) -> QueryResult:
        return QueryResult(
            success=True,
            fields=["age", "name"],
            rows=[[30, "alice"], [None, "bob"]],
            sql="SELECT age, name FROM people",
        )

    def test_to_json(self):
        data = orjson.loads(self._result().to_json())
        assert data == [{"age": 30, "name": "alice"}, {"age": None, "name": "bob"}]

    def test_dumps_matches_to_json(self):
        result = self._result()
        assert dumps(result.as_dicts()) == result.to_json()

    def test_column_values(self):
        assert self._result().get_column_values("name") == ["alice", "bob"]

    def test_table_string(self):
        text = self._result().to_table_string()
        assert text.splitlines()[0] == "age | name"
        assert "NULL | bob" in text

    def test_truthiness_follows_success(self):
        assert self._result()
        failed = QueryResult(success=False, fields=["a"], error="boom")
        assert not failed
        assert failed.is_empty
        assert failed.row_count == 0
