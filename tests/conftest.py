"""Global pytest configuration and fixtures."""

import sqlite3
from logging import Logger
from pathlib import Path

import pytest

from connmate import SQLiteConnection, setup_test_logging

from tests.utils.fake_connection import NativeAsyncConnection, RecordingConnection

MOVIES = [
    ("The Shawshank Redemption", "Frank Darabont", 1994),
    ("The Godfather", "Francis Ford Coppola", 1972),
    ("The Dark Knight", "Christopher Nolan", 2008),
    ("Pulp Fiction", "Quentin Tarantino", 1994),
    ("The Lord of the Rings: The Return of the King", "Peter Jackson", 2003),
    ("Forrest Gump", "Robert Zemeckis", 1994),
    ("Inception", "Christopher Nolan", 2010),
    ("Fight Club", "David Fincher", 1999),
    ("The Matrix", "Lana Wachowski, Lilly Wachowski", 1999),
    ("Goodfellas", "Martin Scorsese", 1990),
]


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from connmate import get_logger

    return get_logger("test")


@pytest.fixture
def movies_db_path(tmp_path: Path) -> Path:
    """SQLite database file with a seeded Movies table."""
    db_path = tmp_path / "movies.db"
    connection = sqlite3.connect(db_path)
    try:
        connection.execute(
            """
            CREATE TABLE Movies (
                Id INTEGER PRIMARY KEY AUTOINCREMENT,
                Title TEXT NOT NULL,
                Director TEXT NULL,
                ReleaseYear INTEGER NULL
            )
            """
        )
        connection.executemany(
            "INSERT INTO Movies (Title, Director, ReleaseYear) VALUES (?, ?, ?)",
            MOVIES,
        )
        connection.commit()
    finally:
        connection.close()
    return db_path


@pytest.fixture
def movies_connection(movies_db_path: Path) -> SQLiteConnection:
    """Closed SQLite connection to the movies database."""
    return SQLiteConnection(movies_db_path)


@pytest.fixture
def recording_connection() -> RecordingConnection:
    """Closed connection double recording every call."""
    return RecordingConnection()


@pytest.fixture
def native_async_connection() -> NativeAsyncConnection:
    """Closed connection double with native async open and begin."""
    return NativeAsyncConnection()
