"""
sql_helper - table-keyed CRUD helper for SQLite

Builds parameterized SQL from table names, field lists and value pairs,
validates them against the live catalog and runs them through SQLAlchemy.
"""

__version__ = "1.0.0"

from .core import (
    ConnectionStateError,
    DatabaseConnection,
    ResultCursor,
    SchemaInspector,
    SchemaValidationError,
    SqliteHelper,
    StaleCursorError,
    StatementBuilder,
    StatementError,
)
from .models.capabilities import DatabaseCapabilities
from .models.config import HelperConfig
from .models.query import QueryResult, Statement
from .models.table import ColumnInfo, FieldDescriptor, TableInfo
from .models.value import ValueKind

__all__ = [
    "SqliteHelper",
    "HelperConfig",
    "DatabaseCapabilities",
    "DatabaseConnection",
    "SchemaInspector",
    "StatementBuilder",
    "ResultCursor",
    "QueryResult",
    "Statement",
    "TableInfo",
    "ColumnInfo",
    "FieldDescriptor",
    "ValueKind",
    "ConnectionStateError",
    "SchemaValidationError",
    "StaleCursorError",
    "StatementError",
]
