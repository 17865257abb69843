"""Table-keyed CRUD facade over a single SQLite connection."""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from sql_helper.core.builder import FieldSpec, Pairs, StatementBuilder, as_pairs
from sql_helper.core.connection import DatabaseConnection
from sql_helper.core.cursor import ResultCursor
from sql_helper.core.inspector import SchemaInspector, SchemaValidationError
from sql_helper.models.config import HelperConfig
from sql_helper.models.query import QueryResult, Statement
from sql_helper.models.table import TableInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Everything the core layer raises for a failed operation
OPERATION_ERRORS = (SQLAlchemyError, ValueError, TypeError, RuntimeError)


def _error_message(error: Exception) -> str:
    """Driver errors verbatim, everything else as its message."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class SqliteHelper:
    """Convenience wrapper for table-keyed SQL over one named connection.

    Every operation reports success as its return value and never raises.
    After a failure ``last_error`` holds the reason and ``last_sql`` the
    statement that was attempted; a successful operation clears
    ``last_error``. Both are overwritten by the next operation.

    Example:
        >>> helper = SqliteHelper()
        >>> helper.open(":memory:", "main")
        True
        >>> helper.create_table("people", {"name": "text", "age": "integer"}, ["name"])
        True
        >>> helper.insert_row_data("people", ["name", "age"], ["alice", 30])
        True
        >>> helper.select_data("people", ["age", "name"]).rows
        [[30, 'alice']]
    """

    def __init__(self, config: Optional[HelperConfig] = None):
        """
        Initialize the helper in the closed state.

        Args:
            config: Connection settings (database and connect_name are
                overridden by ``open``)
        """
        self.config = config or HelperConfig()
        self.connection = DatabaseConnection(self.config)
        self.inspector = SchemaInspector(self.connection)
        self.builder = StatementBuilder()
        self._cursor: Optional[ResultCursor] = None
        self._last_error = ""
        self._last_sql = ""
        self._size = -1

    # ------------------------------------------------------------------
    # State bookkeeping
    # ------------------------------------------------------------------

    def _fail(self, operation: str, error: Exception, sql: str = "") -> None:
        self._last_error = _error_message(error)
        self._last_sql = sql
        self._size = -1
        logger.warning(f"{operation} failed: {self._last_error}")

    def _run(self, statement: Statement) -> ResultCursor:
        # Record the text before execution so failures report it
        self._last_sql = statement.sql
        self._cursor = self.connection.execute(statement)
        return self._cursor

    def _attempt(self, operation: str, action: Callable[[], T]) -> Optional[T]:
        """Run one public operation, translating errors into the error state."""
        self._last_sql = ""
        self._size = -1
        try:
            value = action()
        except OPERATION_ERRORS as e:
            self._fail(operation, e, self._last_sql)
            return None
        self._last_error = ""
        return value

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open(self, database: str, connect_name: Optional[str] = None) -> bool:
        """
        Open the database under a connection name.

        Args:
            database: Database file path or ":memory:"
            connect_name: Name that namespaces this connection in the process

        Returns:
            True if the connection is open
        """
        try:
            self.config = HelperConfig(
                **{
                    **self.config.model_dump(),
                    "database": database,
                    "connect_name": connect_name or self.config.connect_name,
                }
            )
        except ValueError as e:
            self._fail("open", e)
            return False

        self.connection.close()
        self.connection = DatabaseConnection(self.config)
        self.inspector = SchemaInspector(self.connection)
        self._cursor = None

        def action() -> bool:
            self.connection.open()
            self.builder = StatementBuilder(self.connection.quote)
            return True

        return bool(self._attempt("open", action))

    def close(self) -> None:
        """Close the connection. Safe to call when already closed."""
        self.connection.close()
        self._cursor = None
        self._size = -1
        self._last_error = ""

    @property
    def is_open(self) -> bool:
        """Check if the connection is open."""
        return self.connection.is_open

    @property
    def connect_name(self) -> str:
        """Name of this helper's connection."""
        return self.config.connect_name

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def is_exist_table(self, table_name: str) -> bool:
        """Whether a table with exactly this name exists."""
        return bool(
            self._attempt(
                "is_exist_table", lambda: self.inspector.has_table(table_name)
            )
        )

    def check_table_info(self, table_name: str, fields: Iterable[str]) -> bool:
        """
        Check that a table exists and has all of the given fields.

        Args:
            table_name: Table name
            fields: Field names to look for

        Returns:
            True if the table and every field exist
        """
        fields = list(fields)
        result = self._attempt(
            "check_table_info",
            lambda: self.inspector.validate_fields(table_name, fields),
        )
        return result is not None

    def get_table_fields_info(self, table_name: str) -> Optional[list[str]]:
        """Column names of a table in physical order, or None on failure."""
        return self._attempt(
            "get_table_fields_info",
            lambda: self.inspector.get_column_names(table_name),
        )

    def describe_table(self, table_name: str) -> Optional[TableInfo]:
        """Column layout of a table, or None on failure."""
        return self._attempt(
            "describe_table", lambda: self.inspector.describe_table(table_name)
        )

    def create_table(
        self,
        table_name: str,
        fields: FieldSpec,
        primary_keys: Iterable[str] = (),
    ) -> bool:
        """
        Create a table.

        Column order follows the iteration order of ``fields`` but is not
        something callers should rely on.

        Args:
            table_name: Table name
            fields: Column names with SQL types, e.g. {"name": "varchar(5)"}
            primary_keys: Primary key column names

        Returns:
            False if the table already exists or creation fails
        """

        def action() -> bool:
            if self.inspector.has_table(table_name):
                raise SchemaValidationError(f"Table '{table_name}' already exists")
            self._run(self.builder.create_table(table_name, fields, primary_keys))
            logger.info(f"Created table '{table_name}'")
            return True

        return bool(self._attempt("create_table", action))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _select(
        self, operation: str, fields: list[str], build: Callable[[], Statement]
    ) -> QueryResult:
        def action() -> list[list[Any]]:
            cursor = self._run(build())
            rows = cursor.values(fields)
            self._size = len(rows)
            return rows

        rows = self._attempt(operation, action)
        if rows is None:
            return QueryResult(
                success=False,
                fields=fields,
                sql=self._last_sql,
                error=self._last_error,
            )
        return QueryResult(success=True, fields=fields, rows=rows, sql=self._last_sql)

    def select_data(
        self,
        table_name: str,
        fields: Sequence[str],
        where: Optional[Pairs] = None,
    ) -> QueryResult:
        """
        Select fields from one table, optionally filtered by equality conditions.

        Args:
            table_name: Table name
            fields: Fields to select; each row lists values in this order
            where: Field/value conditions, ANDed and bound in order

        Returns:
            Query result, falsy on failure
        """
        fields = list(fields)

        def build() -> Statement:
            pairs = as_pairs(where)
            self.inspector.validate_fields(
                table_name, fields + [name for name, _ in pairs]
            )
            return self.builder.select(table_name, fields, pairs)

        return self._select("select_data", fields, build)

    def select_data_by_sql(self, sql: str, fields: Sequence[str]) -> QueryResult:
        """
        Run a caller-written SELECT and extract fields by name.

        No schema validation is done; this is the path for joins.

        Args:
            sql: Complete SELECT statement
            fields: Result columns to extract, in output order

        Returns:
            Query result, falsy on failure
        """
        return self._select(
            "select_data_by_sql", list(fields), lambda: Statement(sql=sql)
        )

    def size(self) -> int:
        """Row count of the last select, -1 unless it was a successful select."""
        return self._size

    @property
    def cursor(self) -> Optional[ResultCursor]:
        """Cursor of the most recent statement."""
        return self._cursor

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_row_data(
        self, table_name: str, fields: Sequence[str], data: Sequence[Any]
    ) -> bool:
        """
        Insert one row.

        Args:
            table_name: Table name
            fields: Fields to insert
            data: Values in the same order as fields

        Returns:
            True if the row was inserted
        """
        fields = list(fields)

        def action() -> bool:
            self.inspector.validate_fields(table_name, fields)
            self._run(self.builder.insert(table_name, fields, list(data)))
            return True

        return bool(self._attempt("insert_row_data", action))

    def insert_rows_data(
        self,
        table_name: str,
        fields: Sequence[str],
        rows: Iterable[Sequence[Any]],
    ) -> bool:
        """
        Insert several rows with the same statement.

        Stops at the first row that fails. Rows inserted before it are kept;
        wrap the call in ``transaction``/``commit`` for all-or-nothing.

        Args:
            table_name: Table name
            fields: Fields to insert
            rows: Rows of values, each in the same order as fields

        Returns:
            True if every row was inserted
        """
        fields = list(fields)

        def action() -> bool:
            self.inspector.validate_fields(table_name, fields)
            template = self.builder.insert_template(table_name, fields)
            for index, row in enumerate(rows):
                try:
                    self._run(self.builder.bind(template, fields, list(row)))
                except OPERATION_ERRORS:
                    self._last_sql = template.sql
                    logger.debug(f"Row {index} of insert into '{table_name}' failed")
                    raise
            return True

        return bool(self._attempt("insert_rows_data", action))

    def update_data(
        self,
        table_name: str,
        data: Pairs,
        where: Optional[Pairs] = None,
    ) -> bool:
        """
        Update rows matching the conditions.

        An empty ``where`` updates every row in the table.

        Args:
            table_name: Table name
            data: Field/value pairs to set, e.g. {"age": 27}
            where: Field/value equality conditions

        Returns:
            True if the statement ran
        """

        def action() -> bool:
            set_pairs = as_pairs(data)
            where_pairs = as_pairs(where)
            self.inspector.validate_fields(
                table_name,
                [name for name, _ in set_pairs] + [name for name, _ in where_pairs],
            )
            self._run(self.builder.update(table_name, set_pairs, where_pairs))
            return True

        return bool(self._attempt("update_data", action))

    def delete_data(self, table_name: str, where: Optional[Pairs] = None) -> bool:
        """
        Delete rows matching the conditions.

        An empty ``where`` deletes every row in the table.

        Args:
            table_name: Table name
            where: Field/value equality conditions

        Returns:
            True if the statement ran
        """

        def action() -> bool:
            pairs = as_pairs(where)
            self.inspector.validate_fields(table_name, [name for name, _ in pairs])
            self._run(self.builder.delete(table_name, pairs))
            return True

        return bool(self._attempt("delete_data", action))

    def execute(self, sql: str) -> bool:
        """Execute SQL verbatim, without validation or result extraction."""

        def action() -> bool:
            self._run(Statement(sql=sql))
            return True

        return bool(self._attempt("execute", action))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def has_transactions(self) -> bool:
        """Whether the driver supports transactions."""
        return self.connection.is_open and self.connection.capabilities.transactions

    def transaction(self) -> bool:
        """Begin an explicit transaction."""
        return bool(self._attempt("transaction", self._call(self.connection.begin)))

    def commit(self) -> bool:
        """Commit the explicit transaction."""
        return bool(self._attempt("commit", self._call(self.connection.commit)))

    def rollback(self) -> bool:
        """Roll back the explicit transaction."""
        return bool(self._attempt("rollback", self._call(self.connection.rollback)))

    @staticmethod
    def _call(fn: Callable[[], None]) -> Callable[[], bool]:
        def action() -> bool:
            fn()
            return True

        return action

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def last_error(self) -> str:
        """Message of the most recent failure, empty after a success."""
        return self._last_error

    @property
    def last_sql(self) -> str:
        """Text of the most recently attempted statement."""
        return self._last_sql

    def __enter__(self) -> "SqliteHelper":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
