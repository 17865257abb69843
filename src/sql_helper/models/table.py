"""Table, column and field descriptor models."""

from typing import Optional

from pydantic import BaseModel, Field


class FieldDescriptor(BaseModel):
    """A column name with the SQL type used to create it."""

    name: str = Field(..., min_length=1, description="Column name")
    sql_type: str = Field(..., min_length=1, description="SQL type, e.g. varchar(5)")


class ColumnInfo(BaseModel):
    """Information about a table column."""

    name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Column data type")
    nullable: bool = Field(..., description="Whether column allows NULL")
    default: Optional[str] = Field(None, description="Default value expression")
    primary_key: bool = Field(
        default=False, description="Whether column is part of primary key"
    )


class TableInfo(BaseModel):
    """Column layout of a table as reported by the catalog."""

    name: str = Field(..., description="Table name")
    columns: list[ColumnInfo] = Field(
        default_factory=list, description="Columns in physical order"
    )
    primary_key: list[str] = Field(
        default_factory=list, description="Primary key column names"
    )

    @property
    def column_names(self) -> list[str]:
        """Column names in physical order."""
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> Optional[ColumnInfo]:
        """Get column info by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def missing_fields(self, fields: list[str]) -> list[str]:
        """Return the requested field names that are not columns of this table."""
        names = set(self.column_names)
        return [field for field in fields if field not in names]
