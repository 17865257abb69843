"""Core database operations layer."""

from .builder import StatementBuilder, StatementError, as_pairs
from .connection import ConnectionStateError, DatabaseConnection
from .cursor import ResultCursor, StaleCursorError
from .helper import SqliteHelper
from .inspector import SchemaInspector, SchemaValidationError

__all__ = [
    "DatabaseConnection",
    "SchemaInspector",
    "StatementBuilder",
    "ResultCursor",
    "SqliteHelper",
    "as_pairs",
    "ConnectionStateError",
    "SchemaValidationError",
    "StaleCursorError",
    "StatementError",
]
