"""Database command and data reader interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from types import TracebackType
from typing import TYPE_CHECKING, Any

from connmate.models import DbParameter
from connmate.types import RowType

if TYPE_CHECKING:
    from .connection import DbConnection, DbTransaction


class DataReader(ABC):
    """Forward-only cursor over a command's result rows."""

    @abstractmethod
    def read(self) -> bool:
        """Advance to the next row.

        Returns:
            True if a row is available, False once the rows are exhausted
        """
        pass

    @property
    @abstractmethod
    def field_count(self) -> int:
        """Number of columns in the current result."""
        pass

    @abstractmethod
    def get_name(self, ordinal: int) -> str:
        """Column name at ``ordinal``."""
        pass

    @abstractmethod
    def get_value(self, ordinal: int) -> Any:
        """Value of the current row at ``ordinal``."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the cursor."""
        pass

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Check if the reader has been closed."""
        pass

    def row(self) -> RowType:
        """Current row as a column name to value mapping.

        A later duplicate column name overwrites an earlier one.
        """
        return {self.get_name(i): self.get_value(i) for i in range(self.field_count)}

    def __iter__(self) -> Iterator[RowType]:
        while self.read():
            yield self.row()

    def __enter__(self) -> "DataReader":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class DbCommand(ABC):
    """A text command bound to a connection and, optionally, a transaction."""

    def __init__(self, connection: "DbConnection") -> None:
        """Initialize command.

        Args:
            connection: Connection the command executes on
        """
        self.connection = connection
        self.transaction: "DbTransaction | None" = None
        self.text: str = ""
        self.parameters: list[DbParameter] = []

    def add_parameter(
        self, parameter: DbParameter | str, value: Any = None
    ) -> DbParameter:
        """Append a parameter, keeping insertion order.

        Args:
            parameter: A parameter, or a parameter name when ``value`` is given
            value: Value for a parameter given by name

        Returns:
            The appended parameter
        """
        if not isinstance(parameter, DbParameter):
            parameter = DbParameter(name=parameter, value=value)
        self.parameters.append(parameter)
        return parameter

    @abstractmethod
    def execute_non_query(self) -> int:
        """Execute the command and return the number of affected rows."""
        pass

    @abstractmethod
    def execute_scalar(self) -> Any:
        """Execute the command and return the first column of the first row."""
        pass

    @abstractmethod
    def execute_reader(self) -> DataReader:
        """Execute the command and return a reader over its rows."""
        pass

    def close(self) -> None:
        """Release command resources."""
        pass

    def __enter__(self) -> "DbCommand":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
