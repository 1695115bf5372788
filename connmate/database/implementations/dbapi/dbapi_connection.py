"""PEP 249 (DB-API 2.0) connection adapter."""

from collections.abc import Callable
from types import ModuleType
from typing import Any, ClassVar

from connmate.database.interfaces import (
    DataReader,
    DbCommand,
    DbConnection,
    DbTransaction,
)
from connmate.exceptions import ConnectionNotOpenError, ConnMateError
from connmate.log import get_logger
from connmate.models import DbParameter
from connmate.types import ConnectionState, IsolationLevel

logger = get_logger(__name__)

POSITIONAL_PARAMSTYLES = frozenset({"qmark", "format", "numeric"})
NAMED_PARAMSTYLES = frozenset({"named", "pyformat"})

# Levels that ask for no particular isolation
_UNMAPPED_LEVELS = frozenset({IsolationLevel.UNSPECIFIED, IsolationLevel.CHAOS})


def bind_parameters(
    parameters: list[DbParameter], paramstyle: str
) -> list[Any] | dict[str, Any]:
    """Convert ordered parameters to what ``cursor.execute`` expects.

    Args:
        parameters: Parameters in binding order
        paramstyle: DB-API paramstyle of the driver

    Returns:
        Values in order for positional styles, name to value for named styles
    """
    if paramstyle in POSITIONAL_PARAMSTYLES:
        return [p.value for p in parameters]
    if paramstyle in NAMED_PARAMSTYLES:
        return {p.bare_name: p.value for p in parameters}
    raise ValueError(f"Unsupported paramstyle: {paramstyle}")


class DbApiConnection(DbConnection):
    """Connection over any PEP 249 driver.

    Subclasses list the statements a driver needs per isolation level in
    ``begin_statements``; an empty list means the driver needs none. Levels
    missing from it keep the driver's default isolation level, with a warning.
    """

    begin_statements: ClassVar[dict[IsolationLevel, list[str]]] = {}

    def __init__(self, connect: Callable[[], Any], paramstyle: str = "qmark") -> None:
        """Initialize DB-API connection adapter.

        Args:
            connect: Zero-argument callable returning a new driver connection
            paramstyle: How parameters are passed to ``cursor.execute``
        """
        if paramstyle not in POSITIONAL_PARAMSTYLES | NAMED_PARAMSTYLES:
            raise ValueError(f"Unsupported paramstyle: {paramstyle}")
        self._connect = connect
        self.paramstyle = paramstyle
        self._connection: Any = None
        self._warned_levels: set[IsolationLevel] = set()

    @classmethod
    def from_module(
        cls, module: ModuleType, *args: Any, **kwargs: Any
    ) -> "DbApiConnection":
        """Build an adapter from a driver module and its ``connect`` arguments."""
        return cls(
            lambda: module.connect(*args, **kwargs),
            paramstyle=getattr(module, "paramstyle", "qmark"),
        )

    @property
    def state(self) -> ConnectionState:
        if self._connection is None:
            return ConnectionState.CLOSED
        return ConnectionState.OPEN

    @property
    def raw_connection(self) -> Any:
        """Underlying driver connection."""
        if self._connection is None:
            raise ConnectionNotOpenError("Database not connected")
        return self._connection

    def open(self) -> None:
        if self._connection is not None:
            return
        try:
            self._connection = self._connect()
            self._configure_connection()
        except Exception as e:
            logger.error(f"Failed to open connection: {e}")
            self.close()
            raise
        logger.debug(f"Opened {type(self).__name__}")

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed {type(self).__name__}")

    def create_command(self) -> "DbApiCommand":
        return DbApiCommand(self)

    def begin_transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> "DbApiTransaction":
        raw = self.raw_connection
        statements = self.begin_statements.get(isolation_level)
        if statements is None:
            self._warn_unapplied(isolation_level)
        if statements:
            cursor = raw.cursor()
            try:
                for statement in statements:
                    cursor.execute(statement)
            finally:
                cursor.close()
        return DbApiTransaction(self, isolation_level)

    def _warn_unapplied(self, isolation_level: IsolationLevel) -> None:
        if isolation_level in _UNMAPPED_LEVELS:
            return
        # Warned once per level; later calls log at DEBUG
        log = logger.warning
        if isolation_level in self._warned_levels:
            log = logger.debug
        self._warned_levels.add(isolation_level)
        log(
            f"{type(self).__name__} has no statements for "
            f"{isolation_level.sql_name}; using the driver's default isolation level"
        )

    def _configure_connection(self) -> None:
        """Hook run right after the driver connection is created."""
        pass


class DbApiTransaction(DbTransaction):
    """Transaction committed or rolled back through the driver connection."""

    connection: DbApiConnection

    def commit(self) -> None:
        self.connection.raw_connection.commit()

    def rollback(self) -> None:
        self.connection.raw_connection.rollback()


class DbApiCommand(DbCommand):
    """Command executed through a DB-API cursor."""

    connection: DbApiConnection

    def _execute(self) -> Any:
        cursor = self.connection.raw_connection.cursor()
        try:
            if self.parameters:
                cursor.execute(
                    self.text,
                    bind_parameters(self.parameters, self.connection.paramstyle),
                )
            else:
                cursor.execute(self.text)
        except Exception:
            cursor.close()
            raise
        return cursor

    def execute_non_query(self) -> int:
        cursor = self._execute()
        try:
            return int(cursor.rowcount)
        finally:
            cursor.close()

    def execute_scalar(self) -> Any:
        cursor = self._execute()
        try:
            if cursor.description is None:
                return None
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            cursor.close()

    def execute_reader(self) -> "DbApiDataReader":
        return DbApiDataReader(self._execute())


class DbApiDataReader(DataReader):
    """Reader fetching one row at a time from a DB-API cursor."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        description = cursor.description or []
        self._names = [column[0] for column in description]
        self._current: Any = None
        self._closed = False

    def read(self) -> bool:
        if self._closed:
            raise ConnMateError("Reader is closed")
        if not self._names:
            return False
        self._current = self._cursor.fetchone()
        return self._current is not None

    @property
    def field_count(self) -> int:
        return len(self._names)

    def get_name(self, ordinal: int) -> str:
        return str(self._names[ordinal])

    def get_value(self, ordinal: int) -> Any:
        if self._current is None:
            raise ConnMateError("No current row; call read() first")
        return self._current[ordinal]

    def close(self) -> None:
        if not self._closed:
            self._cursor.close()
            self._closed = True

    @property
    def is_closed(self) -> bool:
        return self._closed
