"""Named SQLite connection management with SQLAlchemy."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import Connection, Engine, create_engine, event
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine.reflection import Inspector

from sql_helper.core.cursor import ResultCursor
from sql_helper.models.capabilities import DatabaseCapabilities
from sql_helper.models.config import HelperConfig
from sql_helper.models.query import Statement

logger = logging.getLogger(__name__)

# Open connections by name, shared across the process
_connections: dict[str, "DatabaseConnection"] = {}


class ConnectionStateError(RuntimeError):
    """Raised when an operation does not fit the connection's current state."""


def get_connection(name: str) -> Optional["DatabaseConnection"]:
    """Look up an open connection by name."""
    return _connections.get(name)


def connection_names() -> list[str]:
    """Names of all open connections."""
    return list(_connections)


class DatabaseConnection:
    """Owns one SQLAlchemy engine and one live connection under a name.

    Statements run through ``execute`` are committed immediately unless an
    explicit transaction was started with ``begin``. Every statement bumps
    the connection's generation, which invalidates older result cursors.
    """

    def __init__(self, config: HelperConfig):
        """
        Initialize database connection.

        Args:
            config: Connection configuration
        """
        self.config = config
        self.engine: Optional[Engine] = None
        self.capabilities = DatabaseCapabilities()
        self._conn: Optional[Connection] = None
        self._in_transaction = False
        self._generation = 0

    @property
    def name(self) -> str:
        """Connection name."""
        return self.config.connect_name

    @property
    def generation(self) -> int:
        """Number of statements issued on this connection."""
        return self._generation

    @property
    def is_open(self) -> bool:
        """Check if the connection is open."""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """Whether an explicit transaction is active."""
        return self._in_transaction

    def open(self) -> None:
        """
        Create the engine and check out the connection.

        An open connection already registered under the same name is closed
        and replaced.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the database cannot be opened
        """
        if self.is_open:
            return

        previous = _connections.get(self.name)
        if previous is not None and previous is not self:
            logger.warning(
                f"Connection '{self.name}' is still open; closing it before reuse"
            )
            previous.close()

        engine = create_engine(
            self.config.url,
            echo=self.config.echo_sql,
            connect_args={"timeout": self.config.timeout},
        )

        foreign_keys = self.config.foreign_keys

        @event.listens_for(engine, "connect")
        def _configure_connection(dbapi_conn, connection_record):
            # Leave transaction control to the "begin" hook below
            dbapi_conn.isolation_level = None
            if foreign_keys:
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys = ON")
                cursor.close()

        @event.listens_for(engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

        try:
            conn = engine.connect()
        except Exception:
            engine.dispose()
            raise

        self.engine = engine
        self._conn = conn
        self._in_transaction = False
        self.capabilities = DatabaseCapabilities(
            transactions=True,
            foreign_keys=True,
            positional_parameters=engine.dialect.paramstyle == "qmark",
            query_size=False,
        )
        _connections[self.name] = self
        logger.info(f"Opened SQLite connection '{self.name}' to {self.config.database}")

    def close(self) -> None:
        """Release the connection and dispose of the engine. Safe to call twice."""
        if self._conn is not None:
            if self._in_transaction:
                logger.warning(
                    f"Closing connection '{self.name}' with an open transaction; "
                    f"rolling back"
                )
            self._conn.close()
            self._conn = None
            logger.info(f"Closed SQLite connection '{self.name}'")
        self._in_transaction = False

        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

        if _connections.get(self.name) is self:
            del _connections[self.name]

    def _require_open(self) -> Connection:
        if self._conn is None:
            raise ConnectionStateError(
                f"Database connection '{self.name}' is not open"
            )
        return self._conn

    def _end_implicit_transaction(self, conn: Connection) -> None:
        # Catalog reads autobegin a transaction on the SQLAlchemy side
        if not self._in_transaction and conn.in_transaction():
            conn.commit()

    @contextmanager
    def inspector(self) -> Iterator[Inspector]:
        """
        Get a fresh catalog inspector bound to the live connection.

        Outside an explicit transaction the read transaction opened for the
        catalog queries is ended on exit, so no lock outlives the lookup.

        Yields:
            SQLAlchemy Inspector with an empty reflection cache

        Raises:
            ConnectionStateError: If the connection is closed
        """
        conn = self._require_open()
        self._generation += 1
        try:
            yield sa_inspect(conn)
        finally:
            self._end_implicit_transaction(conn)

    def execute(self, statement: Statement) -> ResultCursor:
        """
        Execute one statement with positional parameters.

        Args:
            statement: SQL text and its parameters

        Returns:
            Buffered cursor over the statement's result

        Raises:
            ConnectionStateError: If the connection is closed
            sqlalchemy.exc.SQLAlchemyError: If the driver rejects the statement
        """
        conn = self._require_open()
        self._end_implicit_transaction(conn)
        self._generation += 1
        logger.debug(f"Executing: {statement.sql} {list(statement.params)}")

        try:
            if statement.params:
                result = conn.exec_driver_sql(statement.sql, statement.params)
            else:
                result = conn.exec_driver_sql(statement.sql)
            cursor = ResultCursor.from_result(result, self, self._generation)
        except Exception:
            if not self._in_transaction and conn.in_transaction():
                conn.rollback()
            raise

        if not self._in_transaction:
            conn.commit()
        return cursor

    def begin(self) -> None:
        """
        Start an explicit transaction.

        Raises:
            ConnectionStateError: If closed or a transaction is already active
        """
        conn = self._require_open()
        if self._in_transaction:
            raise ConnectionStateError(
                "cannot start a transaction within a transaction"
            )
        self._end_implicit_transaction(conn)
        conn.begin()
        self._in_transaction = True
        logger.debug(f"Began transaction on '{self.name}'")

    def commit(self) -> None:
        """
        Commit the explicit transaction.

        Raises:
            ConnectionStateError: If closed or no transaction is active
            sqlalchemy.exc.SQLAlchemyError: If the commit fails
        """
        conn = self._require_open()
        if not self._in_transaction:
            raise ConnectionStateError("cannot commit - no transaction is active")
        conn.commit()
        self._in_transaction = False
        logger.debug(f"Committed transaction on '{self.name}'")

    def rollback(self) -> None:
        """
        Roll back the explicit transaction.

        Raises:
            ConnectionStateError: If closed or no transaction is active
        """
        conn = self._require_open()
        if not self._in_transaction:
            raise ConnectionStateError(
                "cannot rollback - no transaction is active"
            )
        try:
            conn.rollback()
        finally:
            self._in_transaction = False
        logger.debug(f"Rolled back transaction on '{self.name}'")

    def quote(self, identifier: str) -> str:
        """Quote an identifier for the connected dialect where it needs it."""
        if self.engine is None:
            raise ConnectionStateError(
                f"Database connection '{self.name}' is not open"
            )
        return self.engine.dialect.identifier_preparer.quote(identifier)

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
