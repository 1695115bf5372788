"""Database interfaces module."""

from .command import DataReader, DbCommand
from .connection import AsyncDbConnection, DbConnection, DbTransaction

__all__ = [
    "AsyncDbConnection",
    "DataReader",
    "DbCommand",
    "DbConnection",
    "DbTransaction",
]
