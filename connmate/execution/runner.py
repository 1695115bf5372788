"""Transactional command runner.

Every command call follows the same sequence::

    open connection -> begin transaction -> create command -> bind parameters
    -> set text -> run body -> commit | rollback -> close

The commit or rollback decision is made here, never by the body.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from connmate.config import settings
from connmate.database.interfaces import DbCommand, DbConnection, DbTransaction
from connmate.exceptions import CommandExecutionError, InvalidArgumentError
from connmate.log import get_logger
from connmate.models import to_parameters
from connmate.types import ConnectionState, IsolationLevel, ParametersType

from .lifecycle import begin_transaction, raise_if_cancelled, run_blocking

logger = get_logger(__name__)

T = TypeVar("T")

CommandBody = Callable[[DbCommand], T | Awaitable[T]]


def require_argument(value: Any, name: str) -> None:
    """Raise InvalidArgumentError when a required argument is None."""
    if value is None:
        raise InvalidArgumentError(name)


def resolve_isolation_level(
    isolation_level: IsolationLevel | str | None,
) -> IsolationLevel:
    """Requested isolation level, or the configured default."""
    if isolation_level is None:
        return settings.default_isolation_level
    try:
        return IsolationLevel(isolation_level)
    except ValueError as e:
        raise InvalidArgumentError(
            "isolation_level", f"Unknown isolation level: {isolation_level!r}"
        ) from e


async def with_command(
    connection: DbConnection,
    command_text: str | None,
    body: CommandBody[T],
    parameters: ParametersType = None,
    *,
    isolation_level: IsolationLevel | str | None = None,
    cancel_event: asyncio.Event | None = None,
    close_connection: bool | None = None,
) -> T:
    """Run ``body`` against a command inside a transaction.

    Args:
        connection: Connection to run on; opened if closed
        command_text: Command text, required
        body: Callable receiving the live command; may be a coroutine function.
            Plain callables run on a worker thread (the connection's executor
            when it has one).
        parameters: Parameters bound in order before the body runs
        isolation_level: Transaction isolation level (defaults to settings)
        cancel_event: Checked before open, begin and commit
        close_connection: Close the connection when done (defaults to settings)

    Returns:
        Whatever ``body`` returned

    Raises:
        InvalidArgumentError: If command_text or body is None, before any I/O
        CommandExecutionError: If binding, the body or the commit failed; the
            transaction has been rolled back
    """
    require_argument(command_text, "command_text")
    require_argument(body, "body")
    if not callable(body):
        raise InvalidArgumentError("body", "Argument 'body' must be callable")
    level = resolve_isolation_level(isolation_level)
    should_close = (
        settings.close_connection if close_connection is None else close_connection
    )

    try:
        transaction = await begin_transaction(connection, level, cancel_event)
        return await _run_in_transaction(
            connection,
            transaction,
            command_text,  # type: ignore[arg-type]
            body,
            parameters,
            cancel_event,
        )
    finally:
        if should_close:
            await run_blocking(connection.close, executor=connection.executor)


async def _run_in_transaction(
    connection: DbConnection,
    transaction: DbTransaction,
    command_text: str,
    body: CommandBody[T],
    parameters: ParametersType,
    cancel_event: asyncio.Event | None,
) -> T:
    command: DbCommand | None = None
    committed = False

    def commit() -> None:
        nonlocal committed
        transaction.commit()
        committed = True

    try:
        command = connection.create_command()
        command.transaction = transaction
        for parameter in to_parameters(parameters):
            command.add_parameter(parameter)
        command.text = command_text

        result = await _invoke(body, command, connection)

        raise_if_cancelled(cancel_event, "commit")
        await run_blocking(commit, executor=connection.executor)
        logger.debug("Transaction committed")
        return result
    except Exception as e:
        logger.error(f"Command failed, rolling back: {e}")
        await _rollback(connection, transaction)
        raise CommandExecutionError(settings.failure_message, original_error=e) from e
    except asyncio.CancelledError:
        if committed:
            logger.warning("Command cancelled after its transaction committed")
        else:
            logger.warning("Command cancelled, rolling back")
            await _rollback(connection, transaction)
        raise
    finally:
        if command is not None:
            command.close()


async def _invoke(
    body: CommandBody[T], command: DbCommand, connection: DbConnection
) -> T:
    if inspect.iscoroutinefunction(body):
        return await body(command)

    result = await run_blocking(body, command, executor=connection.executor)
    if inspect.isawaitable(result):
        return await result
    return result


async def _rollback(connection: DbConnection, transaction: DbTransaction) -> None:
    if connection.state != ConnectionState.OPEN:
        logger.warning("Connection is no longer open; skipping rollback")
        return
    try:
        await run_blocking(transaction.rollback, executor=connection.executor)
        logger.debug("Transaction rolled back")
    except Exception as e:
        logger.exception(f"Rollback failed: {e}")
