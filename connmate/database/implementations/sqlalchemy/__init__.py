"""SQLAlchemy implementation package."""

from .sqlalchemy_connection import (
    SqlAlchemyCommand,
    SqlAlchemyConnection,
    SqlAlchemyDataReader,
    SqlAlchemyTransaction,
)

__all__ = [
    "SqlAlchemyCommand",
    "SqlAlchemyConnection",
    "SqlAlchemyDataReader",
    "SqlAlchemyTransaction",
]
