"""Connection lifecycle helpers."""

import asyncio
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Any, TypeVar

from connmate.database.interfaces import AsyncDbConnection, DbConnection, DbTransaction
from connmate.exceptions import OperationCancelledError
from connmate.log import get_logger
from connmate.types import ConnectionState, IsolationLevel

logger = get_logger(__name__)

T = TypeVar("T")


def raise_if_cancelled(cancel_event: asyncio.Event | None, step: str) -> None:
    """Raise OperationCancelledError if the cancellation signal is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError(f"Operation cancelled before {step}")


async def run_blocking(
    func: Callable[..., T],
    *args: Any,
    executor: Executor | None = None,
    on_cancel: Callable[[T], None] | None = None,
) -> T:
    """Run a blocking driver call on a worker thread.

    Calls run on ``executor`` when given, otherwise on the default thread pool.
    A running driver call cannot be interrupted, so when the calling task is
    cancelled the call is waited for before ``CancelledError`` is re-raised.
    If it finished successfully, ``on_cancel`` receives its result on the same
    executor so the caller can undo it.
    """
    worker = _submit(executor, func, *args)
    try:
        return await asyncio.shield(worker)
    except asyncio.CancelledError:
        await _wait_for(worker)
        error = worker.exception()
        if error is not None:
            logger.warning(f"{_name(func)} failed after cancel: {error}")
        elif on_cancel is not None:
            undo = _submit(executor, on_cancel, worker.result())
            await _wait_for(undo)
            if undo.exception() is not None:
                logger.warning(
                    f"Undoing {_name(func)} after cancel failed: {undo.exception()}"
                )
        raise


def _submit(
    executor: Executor | None, func: Callable[..., T], *args: Any
) -> "asyncio.Future[T]":
    if executor is None:
        return asyncio.ensure_future(asyncio.to_thread(func, *args))
    return asyncio.get_running_loop().run_in_executor(executor, func, *args)


async def _wait_for(worker: "asyncio.Future[Any]") -> None:
    # The original cancellation is re-raised by the caller
    while not worker.done():
        try:
            await asyncio.wait([worker])
        except asyncio.CancelledError:
            continue


def _name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", repr(func))


async def open_connection(
    connection: DbConnection, cancel_event: asyncio.Event | None = None
) -> None:
    """Open ``connection`` if it is closed; otherwise do nothing.

    Native async connections are opened on the event loop, everything else on
    a worker thread.
    """
    if connection.state != ConnectionState.CLOSED:
        return

    raise_if_cancelled(cancel_event, "opening the connection")
    logger.debug(f"Opening {type(connection).__name__}")
    if isinstance(connection, AsyncDbConnection):
        await connection.open_async()
    else:
        await run_blocking(connection.open, executor=connection.executor)


def _rollback_abandoned(transaction: DbTransaction) -> None:
    logger.warning("Cancelled while beginning a transaction; rolling it back")
    transaction.rollback()


async def begin_transaction(
    connection: DbConnection,
    isolation_level: IsolationLevel,
    cancel_event: asyncio.Event | None = None,
) -> DbTransaction:
    """Begin a transaction, opening the connection first when needed.

    A transaction begun by a worker thread after the caller was cancelled is
    rolled back before the cancellation propagates.
    """
    await open_connection(connection, cancel_event)

    raise_if_cancelled(cancel_event, "beginning a transaction")
    logger.debug(f"Beginning {isolation_level.value} transaction")
    if isinstance(connection, AsyncDbConnection):
        return await connection.begin_transaction_async(isolation_level)
    return await run_blocking(
        connection.begin_transaction,
        isolation_level,
        executor=connection.executor,
        on_cancel=_rollback_abandoned,
    )
