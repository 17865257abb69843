"""Pytest configuration and shared fixtures for sql-helper tests"""

from pathlib import Path
from typing import Generator

import pytest

from sql_helper import DatabaseConnection, HelperConfig, SqliteHelper

PEOPLE_FIELDS = {"name": "text", "age": "integer"}


# ==================== Configuration Fixtures ====================


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a fresh SQLite database file"""
    return tmp_path / "test.db"


@pytest.fixture
def memory_config() -> HelperConfig:
    """Configuration for a private in-memory database"""
    return HelperConfig(connect_name="test-memory")


# ==================== Connection Fixtures ====================


@pytest.fixture
def connection(
    memory_config: HelperConfig,
) -> Generator[DatabaseConnection, None, None]:
    """Open in-memory connection with proper cleanup"""
    conn = DatabaseConnection(memory_config)
    conn.open()
    try:
        yield conn
    finally:
        conn.close()


# ==================== Helper Fixtures ====================


@pytest.fixture
def helper(db_path: Path) -> Generator[SqliteHelper, None, None]:
    """Helper opened on a temporary database file"""
    h = SqliteHelper()
    assert h.open(str(db_path), "test-helper"), h.last_error
    try:
        yield h
    finally:
        h.close()


@pytest.fixture
def people(helper: SqliteHelper) -> SqliteHelper:
    """Helper with an empty 'people' table keyed by name"""
    assert helper.create_table("people", PEOPLE_FIELDS, ["name"]), helper.last_error
    return helper


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "integration: Tests that touch a database file")
    config.addinivalue_line("markers", "slow: Slow-running tests")
