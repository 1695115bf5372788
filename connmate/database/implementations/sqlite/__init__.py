"""SQLite database implementation package."""

from .sqlite_connection import MEMORY_DATABASE, SQLiteConnection

__all__ = [
    "MEMORY_DATABASE",
    "SQLiteConnection",
]
