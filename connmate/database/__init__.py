"""Database connection abstraction and driver adapters."""

from .implementations import DbApiConnection, SQLiteConnection, SqlAlchemyConnection
from .interfaces import (
    AsyncDbConnection,
    DataReader,
    DbCommand,
    DbConnection,
    DbTransaction,
)

__all__ = [
    "AsyncDbConnection",
    "DataReader",
    "DbApiConnection",
    "DbCommand",
    "DbConnection",
    "DbTransaction",
    "SQLiteConnection",
    "SqlAlchemyConnection",
]
