"""Helper configuration model."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.engine.url import make_url

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"
ENV_PREFIX = "SQL_HELPER_"


class HelperConfig(BaseModel):
    """Configuration for a single SQLite connection."""

    database: str = Field(
        default=MEMORY_DATABASE,
        description="Database file path, or :memory: for a private in-memory database",
    )
    connect_name: str = Field(
        default="default",
        min_length=1,
        description="Connection name used to namespace connections in the process",
    )
    timeout: float = Field(
        default=5.0,
        ge=0,
        le=3600,
        description="Seconds to wait on a locked database before failing",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements through the SQLAlchemy engine logger",
    )
    foreign_keys: bool = Field(
        default=False,
        description="Enable foreign key enforcement on connect",
    )

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: str) -> str:
        """Validate the database name, unwrapping sqlite:// URLs."""
        v = v.strip()
        if not v:
            raise ValueError("Database name must not be empty")

        if "://" not in v:
            return v

        try:
            url = make_url(v)
        except Exception as e:
            raise ValueError(f"Invalid database URL: {e}")

        dialect = url.drivername.split("+")[0]
        if dialect != "sqlite":
            raise ValueError(
                f"Unsupported database dialect: {dialect}. Supported: sqlite"
            )

        database = url.database or MEMORY_DATABASE
        logger.info(f"Converted SQLite URL to database path: {database}")
        return database

    @property
    def is_memory(self) -> bool:
        """Whether the database lives only in memory."""
        return self.database == MEMORY_DATABASE

    @property
    def url(self) -> str:
        """SQLAlchemy URL for the configured database."""
        if self.is_memory:
            return "sqlite://"
        return f"sqlite:///{self.database}"

    @classmethod
    def from_env(
        cls, env_file: Optional[str] = None, **overrides
    ) -> "HelperConfig":
        """
        Build a configuration from SQL_HELPER_* environment variables.

        A .env file is loaded first; variables already present in the
        environment take precedence over it.

        Args:
            env_file: Explicit .env path (default: search from the working directory)
            **overrides: Field values that win over the environment

        Returns:
            Validated configuration
        """
        load_dotenv(env_file)

        values = {}
        for field_name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw

        values.update(overrides)
        return cls(**values)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "database": "data/app.db",
                    "connect_name": "main",
                    "timeout": 5.0,
                    "echo_sql": False,
                    "foreign_keys": True,
                }
            ]
        }
    }
