"""Transactional command helpers for relational database connections."""

from .config import Settings, settings
from .database import (
    AsyncDbConnection,
    DataReader,
    DbApiConnection,
    DbCommand,
    DbConnection,
    DbTransaction,
    SQLiteConnection,
    SqlAlchemyConnection,
)
from .exceptions import (
    CommandExecutionError,
    ConnectionNotOpenError,
    ConnMateError,
    InvalidArgumentError,
    OperationCancelledError,
    ScalarCoercionError,
)
from .execution import (
    CommandExecutor,
    execute,
    execute_reader,
    execute_scalar,
    open_connection,
    with_command,
    with_data_reader,
)
from .log import (
    get_logger,
    setup_logging,
    setup_production_logging,
    setup_test_logging,
)
from .models import DbParameter
from .types import ConnectionState, Environment, IsolationLevel

__all__ = [
    "AsyncDbConnection",
    "CommandExecutionError",
    "CommandExecutor",
    "ConnMateError",
    "ConnectionNotOpenError",
    "ConnectionState",
    "DataReader",
    "DbApiConnection",
    "DbCommand",
    "DbConnection",
    "DbParameter",
    "DbTransaction",
    "Environment",
    "InvalidArgumentError",
    "IsolationLevel",
    "OperationCancelledError",
    "SQLiteConnection",
    "ScalarCoercionError",
    "Settings",
    "SqlAlchemyConnection",
    "execute",
    "execute_reader",
    "execute_scalar",
    "get_logger",
    "open_connection",
    "settings",
    "setup_logging",
    "setup_production_logging",
    "setup_test_logging",
    "with_command",
    "with_data_reader",
]
