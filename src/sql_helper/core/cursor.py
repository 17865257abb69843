"""Result cursor over the most recently executed statement."""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy.engine import CursorResult

if TYPE_CHECKING:
    from sql_helper.core.connection import DatabaseConnection


class StaleCursorError(RuntimeError):
    """Raised when a cursor is read after a newer statement was issued."""


class ResultCursor:
    """Buffered rows of one executed statement.

    The cursor is stamped with the connection's statement generation. Any
    later statement on the same connection makes it stale, and reading a
    stale cursor raises StaleCursorError instead of returning rows that no
    longer belong to the current statement.
    """

    def __init__(
        self,
        connection: "DatabaseConnection",
        generation: int,
        columns: list[str],
        rows: list[dict[str, Any]],
        rowcount: int = -1,
        returns_rows: bool = False,
    ):
        self.connection = connection
        self.generation = generation
        self.columns = columns
        self.returns_rows = returns_rows
        self.rowcount = rowcount
        self._rows = rows

    @classmethod
    def from_result(
        cls,
        result: CursorResult,
        connection: "DatabaseConnection",
        generation: int,
    ) -> "ResultCursor":
        """Buffer a driver result so the statement can be committed right away."""
        if not result.returns_rows:
            return cls(connection, generation, [], [], rowcount=result.rowcount)

        columns = list(result.keys())
        rows = [dict(mapping) for mapping in result.mappings()]
        return cls(
            connection,
            generation,
            columns,
            rows,
            rowcount=len(rows),
            returns_rows=True,
        )

    @property
    def is_stale(self) -> bool:
        """Whether a newer statement has been issued on the connection."""
        return self.generation != self.connection.generation

    def _check(self) -> None:
        if self.is_stale:
            raise StaleCursorError(
                f"Cursor from statement #{self.generation} is stale; "
                f"connection is at statement #{self.connection.generation}"
            )

    def __len__(self) -> int:
        self._check()
        return len(self._rows)

    def size(self) -> int:
        """Number of buffered rows, -1 when the statement returned none."""
        self._check()
        return len(self._rows) if self.returns_rows else -1

    def values(self, fields: list[str]) -> list[list[Any]]:
        """
        Extract rows as value lists ordered like fields.

        Each value is looked up by column name, so the output order follows
        fields regardless of the column order in the SQL text.

        Args:
            fields: Column names to extract

        Returns:
            One list of values per row

        Raises:
            StaleCursorError: If the cursor is stale
            ValueError: If a field is not a column of the result
        """
        self._check()
        missing = [field for field in fields if field not in self.columns]
        if missing:
            raise ValueError(
                f"Field(s) not in result set: {', '.join(missing)}. "
                f"Result columns: {', '.join(self.columns)}"
            )
        return [[row[field] for field in fields] for row in self._rows]

    def first(self) -> Optional[dict[str, Any]]:
        """First row as a column-keyed dict, or None."""
        self._check()
        return dict(self._rows[0]) if self._rows else None
