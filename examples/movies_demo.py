#!/usr/bin/env python3
"""Demonstration of transactional commands against a SQLite movies database."""

import asyncio
from datetime import datetime
from pathlib import Path

from connmate import (
    CommandExecutionError,
    CommandExecutor,
    DbParameter,
    IsolationLevel,
    SQLiteConnection,
    get_logger,
    setup_logging,
)

DB_PATH = Path("db") / "movies.demo.db"


async def main() -> None:
    """Demonstrate the command helpers."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info("Starting command demonstration")

    executor = CommandExecutor(SQLiteConnection(str(DB_PATH)))

    try:
        # Demo 1: Schema
        logger.info("=== Demo 1: Schema ===")
        await executor.execute(
            "CREATE TABLE IF NOT EXISTS Movies ("
            "Id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "Title TEXT NOT NULL, Director TEXT, ReleaseYear INTEGER, "
            "AddedAt TIMESTAMP)"
        )
        await executor.execute("DELETE FROM Movies")

        # Demo 2: Parameterized inserts
        logger.info("=== Demo 2: Inserts ===")
        movies = [
            ("Jaws", "Steven Spielberg", 1975),
            ("Alien", "Ridley Scott", 1979),
            ("Heat", "Michael Mann", 1995),
        ]
        for title, director, year in movies:
            affected = await executor.execute(
                "INSERT INTO Movies (Title, Director, ReleaseYear, AddedAt) "
                "VALUES (@Title, @Director, @ReleaseYear, @AddedAt)",
                [
                    DbParameter(name="@Title", value=title),
                    DbParameter(name="@Director", value=director),
                    DbParameter(name="@ReleaseYear", value=year),
                    DbParameter(name="@AddedAt", value=datetime.now().isoformat(" ")),
                ],
            )
            logger.info(f"Inserted {title} ({affected} row)")

        # Demo 3: Scalars
        logger.info("=== Demo 3: Scalars ===")
        count = await executor.execute_scalar("SELECT COUNT(*) FROM Movies", int)
        logger.info(f"Movies stored: {count}")

        added_at = await executor.execute_scalar(
            "SELECT AddedAt FROM Movies WHERE Title = @Title",
            datetime,
            {"Title": "Heat"},
        )
        logger.info(f"Heat was added at {added_at}")

        # Demo 4: Rows
        logger.info("=== Demo 4: Rows ===")
        rows = await executor.execute_reader(
            "SELECT Title, Director, ReleaseYear FROM Movies ORDER BY ReleaseYear",
            isolation_level=IsolationLevel.SERIALIZABLE,
        )
        for row in rows:
            logger.info(f"  - {row['Title']} by {row['Director']} ({row['ReleaseYear']})")

        # Demo 5: Failures roll back
        logger.info("=== Demo 5: Rollback ===")
        try:
            await executor.execute("INSERT INTO Movies (Director) VALUES ('Nobody')")
        except CommandExecutionError as e:
            logger.info(f"Command failed and was rolled back: {e.original_error}")

        count = await executor.execute_scalar("SELECT COUNT(*) FROM Movies", int)
        logger.info(f"Movies stored after rollback: {count}")

        logger.info("Command demonstration completed successfully")

    except Exception as e:
        logger.error(f"Error during demonstration: {e}")
        raise
    finally:
        logger.info(f"Database file saved at: {DB_PATH}")


if __name__ == "__main__":
    asyncio.run(main())
