"""Connection-bound facade over the command functions."""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from connmate.database.interfaces import DataReader, DbConnection
from connmate.types import IsolationLevel, ParametersType, RowType

from . import shapers
from .runner import CommandBody, with_command

T = TypeVar("T")


class CommandExecutor:
    """Runs commands against one connection with shared call options.

    Options given to a method override the executor's own.
    """

    def __init__(
        self,
        connection: DbConnection,
        isolation_level: IsolationLevel | str | None = None,
        close_connection: bool | None = None,
    ) -> None:
        self.connection = connection
        self.isolation_level = isolation_level
        self.close_connection = close_connection

    def _options(
        self,
        isolation_level: IsolationLevel | str | None,
        cancel_event: asyncio.Event | None,
        close_connection: bool | None,
    ) -> dict[str, Any]:
        if close_connection is None:
            close_connection = self.close_connection
        return {
            "isolation_level": isolation_level or self.isolation_level,
            "cancel_event": cancel_event,
            "close_connection": close_connection,
        }

    async def with_command(
        self,
        command_text: str | None,
        body: CommandBody[T],
        parameters: ParametersType = None,
        isolation_level: IsolationLevel | str | None = None,
        cancel_event: asyncio.Event | None = None,
        close_connection: bool | None = None,
    ) -> T:
        return await with_command(
            self.connection,
            command_text,
            body,
            parameters,
            **self._options(isolation_level, cancel_event, close_connection),
        )

    async def execute(
        self,
        command_text: str | None,
        parameters: ParametersType = None,
        isolation_level: IsolationLevel | str | None = None,
        cancel_event: asyncio.Event | None = None,
        close_connection: bool | None = None,
    ) -> int:
        return await shapers.execute(
            self.connection,
            command_text,
            parameters,
            **self._options(isolation_level, cancel_event, close_connection),
        )

    async def execute_scalar(
        self,
        command_text: str | None,
        result_type: type[T] | Any = object,
        parameters: ParametersType = None,
        isolation_level: IsolationLevel | str | None = None,
        cancel_event: asyncio.Event | None = None,
        close_connection: bool | None = None,
    ) -> T | None:
        return await shapers.execute_scalar(
            self.connection,
            command_text,
            result_type,
            parameters,
            **self._options(isolation_level, cancel_event, close_connection),
        )

    async def with_data_reader(
        self,
        command_text: str | None,
        reader_body: Callable[[DataReader], T],
        parameters: ParametersType = None,
        isolation_level: IsolationLevel | str | None = None,
        cancel_event: asyncio.Event | None = None,
        close_connection: bool | None = None,
    ) -> T:
        return await shapers.with_data_reader(
            self.connection,
            command_text,
            reader_body,
            parameters,
            **self._options(isolation_level, cancel_event, close_connection),
        )

    async def execute_reader(
        self,
        command_text: str | None,
        parameters: ParametersType = None,
        isolation_level: IsolationLevel | str | None = None,
        cancel_event: asyncio.Event | None = None,
        close_connection: bool | None = None,
    ) -> list[RowType]:
        return await shapers.execute_reader(
            self.connection,
            command_text,
            parameters,
            **self._options(isolation_level, cancel_event, close_connection),
        )
