"""SQL statement synthesis for table-keyed CRUD requests."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Callable, Optional, Union

from sqlalchemy.dialects import sqlite

from sql_helper.models.query import Statement
from sql_helper.models.table import FieldDescriptor
from sql_helper.models.value import to_driver_values

PLACEHOLDER = "?"

# Ordered (name, value) pairs, or a mapping read in insertion order
Pairs = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]
FieldSpec = Union[Mapping[str, str], Iterable[Union[FieldDescriptor, tuple[str, str]]]]


class StatementError(ValueError):
    """Raised when a request cannot form a valid statement."""


def as_pairs(items: Optional[Pairs]) -> list[tuple[str, Any]]:
    """
    Normalize a mapping or pair sequence into an ordered pair list.

    Args:
        items: Mapping, iterable of (name, value) pairs, or None

    Returns:
        List of (name, value) tuples in binding order

    Raises:
        StatementError: If an item is not a (name, value) pair
    """
    if items is None:
        return []
    if isinstance(items, Mapping):
        return list(items.items())

    pairs = []
    for item in items:
        if not isinstance(item, Sequence) or isinstance(item, str) or len(item) != 2:
            raise StatementError(f"Expected a (name, value) pair, got {item!r}")
        pairs.append((item[0], item[1]))
    return pairs


def as_field_descriptors(fields: FieldSpec) -> list[FieldDescriptor]:
    """Normalize a name->type mapping or sequence into field descriptors."""
    if isinstance(fields, Mapping):
        return [FieldDescriptor(name=k, sql_type=v) for k, v in fields.items()]

    descriptors = []
    for item in fields:
        if isinstance(item, FieldDescriptor):
            descriptors.append(item)
        else:
            name, sql_type = as_pairs([item])[0]
            descriptors.append(FieldDescriptor(name=name, sql_type=sql_type))
    return descriptors


def _default_quote() -> Callable[[str], str]:
    return sqlite.dialect().identifier_preparer.quote


class StatementBuilder:
    """Builds parameterized SQL text from table, fields and value pairs.

    Identifiers go through ``quote``, which only adds quotes where the
    dialect needs them (reserved words, mixed case, special characters).
    Values are never inlined; they are bound to '?' placeholders in the
    order the clauses list them.
    """

    def __init__(self, quote: Optional[Callable[[str], str]] = None):
        self.quote = quote or _default_quote()

    def _names(self, fields: Iterable[str]) -> str:
        return ", ".join(self.quote(field) for field in fields)

    def _where(self, pairs: list[tuple[str, Any]]) -> str:
        if not pairs:
            return ""
        conditions = " AND ".join(
            f"{self.quote(name)} = {PLACEHOLDER}" for name, _ in pairs
        )
        return f" WHERE {conditions}"

    def create_table(
        self,
        table_name: str,
        fields: FieldSpec,
        primary_keys: Iterable[str] = (),
    ) -> Statement:
        """
        Build a CREATE TABLE statement.

        Args:
            table_name: Table name
            fields: Column names with their SQL types
            primary_keys: Names of the (composite) primary key columns

        Returns:
            Statement without parameters
        """
        descriptors = as_field_descriptors(fields)
        if not descriptors:
            raise StatementError(f"No fields given for table '{table_name}'")

        definitions = [f"{self.quote(d.name)} {d.sql_type}" for d in descriptors]
        keys = list(primary_keys)
        if keys:
            definitions.append(f"PRIMARY KEY ({self._names(keys)})")

        sql = f"CREATE TABLE {self.quote(table_name)} ({', '.join(definitions)})"
        return Statement(sql=sql)

    def select(
        self,
        table_name: str,
        fields: Sequence[str],
        where: Optional[Pairs] = None,
    ) -> Statement:
        """
        Build a SELECT over one table with ANDed equality conditions.

        Repeated fields are selected once; rows are extracted by name.

        Args:
            table_name: Table name
            fields: Columns to select
            where: Equality conditions, bound in order

        Returns:
            Statement with the where-values as parameters
        """
        if not fields:
            raise StatementError("No fields given to select")

        pairs = as_pairs(where)
        columns = self._names(dict.fromkeys(fields))
        sql = f"SELECT {columns} FROM {self.quote(table_name)}{self._where(pairs)}"
        return Statement(sql=sql, params=to_driver_values(v for _, v in pairs))

    def insert_template(self, table_name: str, fields: Sequence[str]) -> Statement:
        """Build the INSERT text for fields, with no values bound yet."""
        if not fields:
            raise StatementError("No fields given to insert")

        placeholders = ", ".join(PLACEHOLDER for _ in fields)
        sql = (
            f"INSERT INTO {self.quote(table_name)} ({self._names(fields)}) "
            f"VALUES ({placeholders})"
        )
        return Statement(sql=sql)

    def bind(
        self, template: Statement, fields: Sequence[str], values: Sequence[Any]
    ) -> Statement:
        """
        Bind one row of values to an insert template, in field order.

        Raises:
            StatementError: If the value count differs from the field count
            TypeError: If a value cannot be bound
        """
        if len(values) != len(fields):
            raise StatementError(
                f"Expected {len(fields)} values for fields "
                f"({', '.join(fields)}), got {len(values)}"
            )
        return Statement(sql=template.sql, params=to_driver_values(values))

    def insert(
        self, table_name: str, fields: Sequence[str], values: Sequence[Any]
    ) -> Statement:
        """Build a single-row INSERT with values bound in field order."""
        return self.bind(self.insert_template(table_name, fields), fields, values)

    def update(
        self,
        table_name: str,
        values: Pairs,
        where: Optional[Pairs] = None,
    ) -> Statement:
        """
        Build an UPDATE; set-values bind before where-values.

        An empty where produces an unconditional UPDATE of every row.
        """
        set_pairs = as_pairs(values)
        if not set_pairs:
            raise StatementError("No fields given to update")

        where_pairs = as_pairs(where)
        assignments = ", ".join(
            f"{self.quote(name)} = {PLACEHOLDER}" for name, _ in set_pairs
        )
        sql = (
            f"UPDATE {self.quote(table_name)} SET {assignments}"
            f"{self._where(where_pairs)}"
        )
        params = [v for _, v in set_pairs] + [v for _, v in where_pairs]
        return Statement(sql=sql, params=to_driver_values(params))

    def delete(self, table_name: str, where: Optional[Pairs] = None) -> Statement:
        """Build a DELETE; an empty where deletes every row."""
        pairs = as_pairs(where)
        sql = f"DELETE FROM {self.quote(table_name)}{self._where(pairs)}"
        return Statement(sql=sql, params=to_driver_values(v for _, v in pairs))
