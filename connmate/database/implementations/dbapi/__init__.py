"""DB-API 2.0 implementation package."""

from .dbapi_connection import (
    DbApiCommand,
    DbApiConnection,
    DbApiDataReader,
    DbApiTransaction,
    bind_parameters,
)

__all__ = [
    "DbApiCommand",
    "DbApiConnection",
    "DbApiDataReader",
    "DbApiTransaction",
    "bind_parameters",
]
