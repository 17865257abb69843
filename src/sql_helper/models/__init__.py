"""Pydantic models for configuration, schema and results."""

from .capabilities import DatabaseCapabilities
from .config import HelperConfig
from .query import QueryResult, Statement
from .table import ColumnInfo, FieldDescriptor, TableInfo
from .value import ValueKind, kind_of, to_driver_value, to_driver_values

__all__ = [
    "DatabaseCapabilities",
    "HelperConfig",
    "QueryResult",
    "Statement",
    "ColumnInfo",
    "FieldDescriptor",
    "TableInfo",
    "ValueKind",
    "kind_of",
    "to_driver_value",
    "to_driver_values",
]
