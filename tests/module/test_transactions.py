"""Module Tests for SqliteHelper transaction control

Validates:
- Rollback discards and commit keeps rows
- Multi-row inserts become atomic inside an explicit transaction
- Transaction state errors surface through last_error
"""

from pathlib import Path

from sql_helper import SqliteHelper


def _names(helper: SqliteHelper) -> list[str]:
    result = helper.select_data("people", ["name"])
    assert result, result.error
    return sorted(row[0] for row in result.rows)


class TestTransactionScenario:
    """Begin/insert/rollback, then begin/insert/commit."""

    def test_rollback_then_commit(self, people: SqliteHelper):
        assert people.has_transactions()

        assert people.transaction()
        assert people.insert_row_data("people", ["name", "age"], ["alice", 30])
        assert people.rollback()
        assert _names(people) == []

        assert people.transaction()
        assert people.insert_row_data("people", ["name", "age"], ["alice", 30])
        assert people.commit()
        assert _names(people) == ["alice"]

    def test_committed_rows_visible_to_other_connections(
        self, people: SqliteHelper, db_path: Path
    ):
        assert people.transaction()
        people.insert_row_data("people", ["name", "age"], ["bob", 41])
        assert people.commit()

        with SqliteHelper() as other:
            assert other.open(str(db_path), "observer")
            assert other.select_data("people", ["name", "age"]).rows == [["bob", 41]]

    def test_updates_and_deletes_roll_back(self, people: SqliteHelper):
        people.insert_rows_data("people", ["name", "age"], [["a", 1], ["b", 2]])

        assert people.transaction()
        assert people.update_data("people", {"age": 99}, {})
        assert people.delete_data("people", {"name": "a"})
        assert people.rollback()

        rows = people.select_data("people", ["name", "age"]).rows
        assert sorted(rows) == [["a", 1], ["b", 2]]


class TestTransactionalDdl:
    """Schema changes follow the transaction boundary like DML does."""

    def test_create_table_first_rolls_back(self, helper: SqliteHelper):
        assert helper.transaction()
        assert helper.create_table("pets", {"name": "text"})
        assert helper.is_exist_table("pets")
        assert helper.rollback()

        assert not helper.is_exist_table("pets")

    def test_raw_ddl_first_rolls_back(self, people: SqliteHelper):
        assert people.transaction()
        assert people.execute("CREATE TABLE t2 (a integer)")
        assert people.insert_row_data("people", ["name", "age"], ["alice", 30])
        assert people.rollback()

        assert not people.is_exist_table("t2")
        assert _names(people) == []

    def test_create_table_commits(self, helper: SqliteHelper, db_path: Path):
        assert helper.transaction()
        assert helper.create_table("pets", {"name": "text"})
        assert helper.commit()

        with SqliteHelper() as other:
            assert other.open(str(db_path), "ddl-observer")
            assert other.is_exist_table("pets")


class TestAtomicMultiRowInsert:
    """Multi-row inserts wrapped by the caller."""

    def test_failure_inside_transaction_can_be_rolled_back(self, people: SqliteHelper):
        rows = [["a", 1], ["b", 2], ["a", 3]]

        assert people.transaction()
        assert not people.insert_rows_data("people", ["name", "age"], rows)
        assert people.rollback()

        assert _names(people) == []

    def test_without_transaction_earlier_rows_persist(self, people: SqliteHelper):
        rows = [["a", 1], ["b", 2], ["a", 3]]
        assert not people.insert_rows_data("people", ["name", "age"], rows)
        assert _names(people) == ["a", "b"]


class TestTransactionErrors:
    """State errors are reported, not raised."""

    def test_nested_begin_fails(self, people: SqliteHelper):
        assert people.transaction()
        assert not people.transaction()
        assert "within a transaction" in people.last_error
        assert people.rollback()
        assert people.last_error == ""

    def test_commit_without_transaction(self, people: SqliteHelper):
        assert not people.commit()
        assert "no transaction is active" in people.last_error

    def test_rollback_without_transaction(self, people: SqliteHelper):
        assert not people.rollback()
        assert "no transaction is active" in people.last_error

    def test_close_discards_open_transaction(self, people: SqliteHelper, db_path: Path):
        assert people.transaction()
        people.insert_row_data("people", ["name", "age"], ["ghost", 1])
        people.close()

        with SqliteHelper() as other:
            assert other.open(str(db_path), "after-close")
            assert other.select_data("people", ["name"]).rows == []
