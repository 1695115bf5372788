"""SQLite database connection implementation."""

import sqlite3
from pathlib import Path
from typing import ClassVar

from connmate.config import settings
from connmate.database.implementations.dbapi import DbApiConnection
from connmate.log import get_logger
from connmate.types import IsolationLevel

logger = get_logger(__name__)

MEMORY_DATABASE = ":memory:"

_DEFERRED = ["PRAGMA read_uncommitted = 0", "BEGIN DEFERRED"]


class SQLiteConnection(DbApiConnection):
    """SQLite connection with explicit transaction control.

    The driver runs in autocommit mode and every transaction is started with an
    explicit BEGIN. SQLite is always serializable; READ_UNCOMMITTED only has an
    effect on shared-cache connections, and SERIALIZABLE takes the write lock
    up front.
    """

    begin_statements: ClassVar[dict[IsolationLevel, list[str]]] = {
        IsolationLevel.UNSPECIFIED: _DEFERRED,
        IsolationLevel.CHAOS: _DEFERRED,
        IsolationLevel.READ_UNCOMMITTED: [
            "PRAGMA read_uncommitted = 1",
            "BEGIN DEFERRED",
        ],
        IsolationLevel.READ_COMMITTED: _DEFERRED,
        IsolationLevel.REPEATABLE_READ: _DEFERRED,
        IsolationLevel.SNAPSHOT: _DEFERRED,
        IsolationLevel.SERIALIZABLE: [
            "PRAGMA read_uncommitted = 0",
            "BEGIN IMMEDIATE",
        ],
    }

    def __init__(
        self,
        database: str | Path = MEMORY_DATABASE,
        timeout: float | None = None,
        paramstyle: str = "named",
    ) -> None:
        """Initialize SQLite connection.

        Args:
            database: Path to SQLite database file, or ":memory:"
            timeout: Seconds to wait for a lock (defaults to settings)
            paramstyle: "named" for :name / @name / $name, "qmark" for ?
        """
        super().__init__(self._create_connection, paramstyle=paramstyle)
        self.database = database
        self.timeout = settings.sqlite_timeout if timeout is None else timeout

    def _create_connection(self) -> sqlite3.Connection:
        if str(self.database) != MEMORY_DATABASE:
            Path(self.database).parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(
            self.database,
            check_same_thread=False,
            timeout=self.timeout,
            isolation_level=None,
        )
        logger.info(f"Connected to SQLite: {self.database}")
        return connection

    def _configure_connection(self) -> None:
        """Configure SQLite connection settings."""
        raw = self.raw_connection
        # Set busy timeout for better handling of concurrent access
        raw.execute(f"PRAGMA busy_timeout = {int(settings.sqlite_busy_timeout_ms)}")
        raw.execute(
            f"PRAGMA foreign_keys = {'ON' if settings.sqlite_foreign_keys else 'OFF'}"
        )
