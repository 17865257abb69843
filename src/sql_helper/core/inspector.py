"""Catalog introspection and schema validation using SQLAlchemy reflection."""

import logging
from typing import Any, Iterable

from sqlalchemy.exc import NoSuchTableError

from sql_helper.core.connection import DatabaseConnection
from sql_helper.models.table import ColumnInfo, TableInfo

logger = logging.getLogger(__name__)


class SchemaValidationError(ValueError):
    """Raised when a request names a table or field the schema does not have."""


class SchemaInspector:
    """Table and column lookups against the live catalog."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize schema inspector.

        Args:
            connection: Open database connection
        """
        self.connection = connection

    def get_table_names(self) -> list[str]:
        """List user tables in the main schema."""
        with self.connection.inspector() as inspector:
            return inspector.get_table_names()

    def has_table(self, table_name: str) -> bool:
        """Case-sensitive exact match against the catalog's table list."""
        return table_name in self.get_table_names()

    def get_column_names(self, table_name: str) -> list[str]:
        """
        Get column names of a table in physical order.

        Args:
            table_name: Table name

        Returns:
            Column names

        Raises:
            SchemaValidationError: If the table does not exist
        """
        return self.describe_table(table_name).column_names

    def describe_table(self, table_name: str) -> TableInfo:
        """
        Get the column layout of a table.

        Args:
            table_name: Table name

        Returns:
            Table information with columns and primary key

        Raises:
            SchemaValidationError: If the table does not exist
        """
        if not self.has_table(table_name):
            raise SchemaValidationError(f"Table '{table_name}' does not exist")

        try:
            with self.connection.inspector() as inspector:
                columns = inspector.get_columns(table_name)
                pk_constraint = inspector.get_pk_constraint(table_name)
        except NoSuchTableError:
            raise SchemaValidationError(f"Table '{table_name}' does not exist")

        pk_cols = list(pk_constraint.get("constrained_columns") or [])
        table_info = TableInfo(
            name=table_name,
            columns=[self._column_from_sa(col) for col in columns],
            primary_key=pk_cols,
        )
        for col in table_info.columns:
            if col.name in pk_cols:
                col.primary_key = True
        return table_info

    def validate_fields(self, table_name: str, fields: Iterable[str]) -> TableInfo:
        """
        Check that a table exists and has every requested field.

        Args:
            table_name: Table name
            fields: Field names the request refers to

        Returns:
            Table information, for callers that need it

        Raises:
            SchemaValidationError: If the table or any field is missing
        """
        table_info = self.describe_table(table_name)
        missing = table_info.missing_fields(list(fields))
        if missing:
            raise SchemaValidationError(
                f"Field(s) {', '.join(missing)} not found in table '{table_name}'"
            )
        return table_info

    def _column_from_sa(self, col_data: Any) -> ColumnInfo:
        """Convert SQLAlchemy column data to ColumnInfo."""
        return ColumnInfo(
            name=col_data["name"],
            data_type=str(col_data["type"]),
            nullable=col_data["nullable"],
            default=str(col_data["default"]) if col_data.get("default") else None,
        )
