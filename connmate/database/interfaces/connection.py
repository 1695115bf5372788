"""Database connection interface."""

from abc import ABC, abstractmethod
from concurrent.futures import Executor
from types import TracebackType
from typing import TYPE_CHECKING

from connmate.types import ConnectionState, IsolationLevel

if TYPE_CHECKING:
    from .command import DbCommand


class DbConnection(ABC):
    """Abstract synchronous database connection.

    Implementations wrap a driver connection. ``open`` must be safe to call
    again after ``close`` so one instance can serve several command calls.

    Blocking calls run on the default thread pool. Drivers whose connections
    are bound to the thread that created them set ``executor`` to a
    single-thread executor so every call lands on that thread.
    """

    executor: Executor | None = None

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        """Current connection state."""
        pass

    @abstractmethod
    def open(self) -> None:
        """Open the driver connection."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the driver connection. Closing a closed connection is a no-op."""
        pass

    @abstractmethod
    def create_command(self) -> "DbCommand":
        """Create a command bound to this connection."""
        pass

    @abstractmethod
    def begin_transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> "DbTransaction":
        """Begin a transaction.

        Args:
            isolation_level: Requested isolation level

        Returns:
            Transaction object
        """
        pass

    @property
    def is_open(self) -> bool:
        """Check if connection is open."""
        return self.state == ConnectionState.OPEN

    def __enter__(self) -> "DbConnection":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()


class AsyncDbConnection(DbConnection):
    """Connection whose driver can open and begin transactions natively async."""

    @abstractmethod
    async def open_async(self) -> None:
        """Open the driver connection without blocking the event loop."""
        pass

    @abstractmethod
    async def begin_transaction_async(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> "DbTransaction":
        """Begin a transaction without blocking the event loop."""
        pass

    async def __aenter__(self) -> "AsyncDbConnection":
        """Async context manager entry."""
        await self.open_async()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit."""
        self.close()


class DbTransaction(ABC):
    """Abstract database transaction interface."""

    def __init__(
        self, connection: DbConnection, isolation_level: IsolationLevel
    ) -> None:
        """Initialize transaction.

        Args:
            connection: Connection the transaction runs on
            isolation_level: Isolation level the transaction was started with
        """
        self.connection = connection
        self.isolation_level = isolation_level

    @abstractmethod
    def commit(self) -> None:
        """Commit the transaction."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Rollback the transaction."""
        pass

    def __enter__(self) -> "DbTransaction":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Commit on success, roll back on error."""
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
