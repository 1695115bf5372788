"""Configuration management for connmate."""

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .exceptions import DEFAULT_FAILURE_MESSAGE
from .types import Environment, IsolationLevel

ENV_PREFIX = "CONNMATE_"
TRUE_VALUES = ["true", "1", "yes", "on"]


class Settings(BaseModel):
    """Library settings."""

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development/production/testing)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Command execution
    default_isolation_level: IsolationLevel = Field(
        default=IsolationLevel.READ_COMMITTED,
        description="Isolation level used when a call does not name one",
    )
    close_connection: bool = Field(
        default=True,
        description="Whether a command call closes the connection it was given",
    )
    failure_message: str = Field(
        default=DEFAULT_FAILURE_MESSAGE,
        description="Message of the error raised when a command fails",
    )

    # SQLite adapter
    sqlite_timeout: float = Field(
        default=60.0, description="Seconds sqlite3 waits for a database lock"
    )
    sqlite_busy_timeout_ms: int = Field(
        default=90000, description="PRAGMA busy_timeout applied on open"
    )
    sqlite_foreign_keys: bool = Field(
        default=True, description="Whether PRAGMA foreign_keys is enabled on open"
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        # Testing runs always log at DEBUG
        if self.environment == Environment.TESTING:
            self.log_level = "DEBUG"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def load_settings() -> Settings:
    """Load settings from environment variables."""

    # Load .env file if it exists
    load_dotenv()

    return Settings(
        environment=Environment(_env("ENV", "development")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        default_isolation_level=IsolationLevel(
            _env("DEFAULT_ISOLATION_LEVEL", "read_committed").lower()
        ),
        close_connection=_env("CLOSE_CONNECTION", "true").lower() in TRUE_VALUES,
        failure_message=_env("FAILURE_MESSAGE", DEFAULT_FAILURE_MESSAGE),
        sqlite_timeout=float(_env("SQLITE_TIMEOUT", "60.0")),
        sqlite_busy_timeout_ms=int(_env("SQLITE_BUSY_TIMEOUT_MS", "90000")),
        sqlite_foreign_keys=_env("SQLITE_FOREIGN_KEYS", "true").lower()
        in TRUE_VALUES,
    )


# Global settings instance
settings = load_settings()
