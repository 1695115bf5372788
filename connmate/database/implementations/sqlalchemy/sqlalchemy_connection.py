"""SQLAlchemy engine connection adapter."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Engine, RootTransaction
from sqlalchemy.pool import SingletonThreadPool

from connmate.database.interfaces import (
    DataReader,
    DbCommand,
    DbConnection,
    DbTransaction,
)
from connmate.exceptions import ConnectionNotOpenError, ConnMateError
from connmate.log import get_logger
from connmate.types import ConnectionState, IsolationLevel

logger = get_logger(__name__)

# Levels with no SQL equivalent leave the dialect default in place
_UNMAPPED_LEVELS = frozenset({IsolationLevel.UNSPECIFIED, IsolationLevel.CHAOS})


class SqlAlchemyConnection(DbConnection):
    """Connection checked out from a SQLAlchemy ``Engine``.

    Engines whose pool hands out one driver connection per thread (such as the
    default pool of an in-memory SQLite engine) get a single-thread executor,
    so every call of this adapter uses the same driver connection.
    """

    def __init__(self, engine: Engine, pin_thread: bool | None = None) -> None:
        """Initialize SQLAlchemy connection adapter.

        Args:
            engine: Engine to check connections out from
            pin_thread: Run every blocking call on one dedicated thread
                (defaults to True for thread-bound pools)
        """
        self.engine = engine
        self._connection: Connection | None = None
        self._warned_levels: set[IsolationLevel] = set()
        if pin_thread is None:
            pin_thread = isinstance(engine.pool, SingletonThreadPool)
        if pin_thread:
            self.executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="connmate-sqlalchemy"
            )
            logger.debug(f"Pinning {engine.url!r} calls to a single thread")

    @property
    def state(self) -> ConnectionState:
        if self._connection is None or self._connection.closed:
            return ConnectionState.CLOSED
        if self._connection.invalidated:
            return ConnectionState.BROKEN
        return ConnectionState.OPEN

    @property
    def raw_connection(self) -> Connection:
        """Underlying SQLAlchemy connection."""
        if self._connection is None or self._connection.closed:
            raise ConnectionNotOpenError("Database not connected")
        return self._connection

    def open(self) -> None:
        if self.state == ConnectionState.OPEN:
            return
        self._connection = self.engine.connect()
        logger.debug(f"Checked out connection from {self.engine.url!r}")

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Returned connection to {self.engine.url!r}")

    def create_command(self) -> "SqlAlchemyCommand":
        return SqlAlchemyCommand(self)

    def begin_transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> "SqlAlchemyTransaction":
        connection = self.raw_connection
        option = self._isolation_option(isolation_level)
        if option is not None:
            connection.execution_options(isolation_level=option)
        return SqlAlchemyTransaction(self, isolation_level, connection.begin())

    def _isolation_option(self, isolation_level: IsolationLevel) -> str | None:
        """Dialect isolation level name, or None to keep the dialect default."""
        if isolation_level in _UNMAPPED_LEVELS:
            return None
        name = isolation_level.sql_name
        supported = self._supported_isolation_levels()
        if supported is not None and name not in supported:
            # Warned once per level; later calls log at DEBUG
            log = logger.warning
            if isolation_level in self._warned_levels:
                log = logger.debug
            self._warned_levels.add(isolation_level)
            log(
                f"Dialect {self.engine.dialect.name} does not support {name}; "
                "using its default isolation level"
            )
            return None
        return name

    def _supported_isolation_levels(self) -> set[str] | None:
        dbapi_connection = self.raw_connection.connection.dbapi_connection
        try:
            return set(
                self.engine.dialect.get_isolation_level_values(dbapi_connection)
            )
        except NotImplementedError:
            return None


class SqlAlchemyTransaction(DbTransaction):
    """Wraps a SQLAlchemy root transaction."""

    def __init__(
        self,
        connection: SqlAlchemyConnection,
        isolation_level: IsolationLevel,
        transaction: RootTransaction,
    ) -> None:
        super().__init__(connection, isolation_level)
        self._transaction = transaction

    def commit(self) -> None:
        self._transaction.commit()

    def rollback(self) -> None:
        self._transaction.rollback()


class SqlAlchemyCommand(DbCommand):
    """Command executed as a ``text()`` construct with named binds."""

    connection: SqlAlchemyConnection

    def _execute(self) -> CursorResult[Any]:
        statement = text(self.text)
        connection = self.connection.raw_connection
        if self.parameters:
            return connection.execute(
                statement, {p.bare_name: p.value for p in self.parameters}
            )
        return connection.execute(statement)

    def execute_non_query(self) -> int:
        result = self._execute()
        try:
            return int(result.rowcount)
        finally:
            result.close()

    def execute_scalar(self) -> Any:
        result = self._execute()
        if not result.returns_rows:
            result.close()
            return None
        return result.scalar()

    def execute_reader(self) -> "SqlAlchemyDataReader":
        return SqlAlchemyDataReader(self._execute())


class SqlAlchemyDataReader(DataReader):
    """Reader over a SQLAlchemy cursor result."""

    def __init__(self, result: CursorResult[Any]) -> None:
        self._result = result
        self._names = list(result.keys()) if result.returns_rows else []
        self._current: Any = None
        self._closed = False

    def read(self) -> bool:
        if self._closed:
            raise ConnMateError("Reader is closed")
        if not self._names:
            return False
        self._current = self._result.fetchone()
        return self._current is not None

    @property
    def field_count(self) -> int:
        return len(self._names)

    def get_name(self, ordinal: int) -> str:
        return self._names[ordinal]

    def get_value(self, ordinal: int) -> Any:
        if self._current is None:
            raise ConnMateError("No current row; call read() first")
        return self._current[ordinal]

    def close(self) -> None:
        if not self._closed:
            self._result.close()
            self._closed = True

    @property
    def is_closed(self) -> bool:
        return self._closed
