"""Statement and query result models."""

from typing import Any

from pydantic import BaseModel, Field

from sql_helper.utils.serialization import dumps


class Statement(BaseModel):
    """SQL text with its positional parameters."""

    sql: str = Field(..., description="SQL text with '?' placeholders")
    params: tuple[Any, ...] = Field(
        default=(), description="Values bound to the placeholders, in order"
    )

    def __str__(self) -> str:
        return self.sql


class QueryResult(BaseModel):
    """Outcome of a select call.

    Truthy exactly when the select succeeded. On failure ``rows`` is empty and
    ``error`` carries the reason.
    """

    success: bool = Field(..., description="Whether the select succeeded")
    fields: list[str] = Field(..., description="Requested field names, in row order")
    rows: list[list[Any]] = Field(
        default_factory=list, description="Rows ordered like fields"
    )
    sql: str = Field(default="", description="Executed or attempted SQL text")
    error: str = Field(default="", description="Error message when success is False")

    def __bool__(self) -> bool:
        return self.success

    @property
    def row_count(self) -> int:
        """Number of rows returned."""
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        """Check if result set is empty."""
        return not self.rows

    def get_column_values(self, field: str) -> list[Any]:
        """Extract all values for a specific field."""
        index = self.fields.index(field)
        return [row[index] for row in self.rows]

    def as_dicts(self) -> list[dict[str, Any]]:
        """Rows as field-name keyed dictionaries."""
        return [dict(zip(self.fields, row)) for row in self.rows]

    def to_json(self) -> str:
        """Serialize the rows as a JSON array of objects."""
        return dumps(self.as_dicts())

    def to_table_string(self, max_rows: int = 10) -> str:
        """Format result as a simple table string."""
        if self.is_empty:
            return "No rows returned"

        result_lines = [" | ".join(self.fields)]
        result_lines.append("-" * len(result_lines[0]))

        for row in self.rows[:max_rows]:
            values = ["NULL" if value is None else str(value) for value in row]
            result_lines.append(" | ".join(values))

        if len(self.rows) > max_rows:
            result_lines.append(f"... ({self.row_count - max_rows} more rows)")

        return "\n".join(result_lines)
