"""Result shapers built on the transactional command runner."""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from connmate.coercion import coerce_value
from connmate.database.interfaces import DataReader, DbCommand, DbConnection
from connmate.log import get_logger
from connmate.types import IsolationLevel, ParametersType, RowType

from .runner import require_argument, with_command

logger = get_logger(__name__)

T = TypeVar("T")


async def execute(
    connection: DbConnection,
    command_text: str | None,
    parameters: ParametersType = None,
    *,
    isolation_level: IsolationLevel | str | None = None,
    cancel_event: asyncio.Event | None = None,
    close_connection: bool | None = None,
) -> int:
    """Execute a command and return the number of affected rows.

    Drivers report -1 for statements that do not modify rows.
    """
    require_argument(command_text, "command_text")

    def run(command: DbCommand) -> int:
        return command.execute_non_query()

    return await with_command(
        connection,
        command_text,
        run,
        parameters,
        isolation_level=isolation_level,
        cancel_event=cancel_event,
        close_connection=close_connection,
    )


async def execute_scalar(
    connection: DbConnection,
    command_text: str | None,
    result_type: type[T] | Any = object,
    parameters: ParametersType = None,
    *,
    isolation_level: IsolationLevel | str | None = None,
    cancel_event: asyncio.Event | None = None,
    close_connection: bool | None = None,
) -> T | None:
    """Execute a command and return its first column of the first row.

    A NULL or missing value becomes the default of ``result_type`` (0 for int,
    ``datetime.min`` for datetime, None for types without a default). Other
    values are converted to ``result_type``.

    Raises:
        ScalarCoercionError: If the value cannot be converted. The transaction
            has already been committed at that point.
    """
    require_argument(command_text, "command_text")

    def run(command: DbCommand) -> Any:
        return command.execute_scalar()

    raw = await with_command(
        connection,
        command_text,
        run,
        parameters,
        isolation_level=isolation_level,
        cancel_event=cancel_event,
        close_connection=close_connection,
    )
    return coerce_value(raw, result_type)


async def with_data_reader(
    connection: DbConnection,
    command_text: str | None,
    reader_body: Callable[[DataReader], T],
    parameters: ParametersType = None,
    *,
    isolation_level: IsolationLevel | str | None = None,
    cancel_event: asyncio.Event | None = None,
    close_connection: bool | None = None,
) -> T:
    """Execute a command and hand its reader to ``reader_body``.

    The reader is closed before the transaction completes, whatever the body
    does. ``reader_body`` runs on a worker thread.
    """
    require_argument(command_text, "command_text")
    require_argument(reader_body, "reader_body")

    def run(command: DbCommand) -> T:
        with command.execute_reader() as reader:
            return reader_body(reader)

    return await with_command(
        connection,
        command_text,
        run,
        parameters,
        isolation_level=isolation_level,
        cancel_event=cancel_event,
        close_connection=close_connection,
    )


async def execute_reader(
    connection: DbConnection,
    command_text: str | None,
    parameters: ParametersType = None,
    *,
    isolation_level: IsolationLevel | str | None = None,
    cancel_event: asyncio.Event | None = None,
    close_connection: bool | None = None,
) -> list[RowType]:
    """Execute a query and return every row as a column name to value dict.

    Keys follow the driver's column order; a later duplicate column name
    overwrites an earlier one.
    """
    require_argument(command_text, "command_text")

    def collect(reader: DataReader) -> list[RowType]:
        return list(reader)

    rows = await with_data_reader(
        connection,
        command_text,
        collect,
        parameters,
        isolation_level=isolation_level,
        cancel_event=cancel_event,
        close_connection=close_connection,
    )
    logger.debug(f"Read {len(rows)} rows")
    return rows
