"""Database implementations package."""

from .dbapi import DbApiConnection
from .sqlalchemy import SqlAlchemyConnection
from .sqlite import SQLiteConnection

__all__ = [
    "DbApiConnection",
    "SQLiteConnection",
    "SqlAlchemyConnection",
]
