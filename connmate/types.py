"""Common type definitions for connmate."""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from connmate.models import DbParameter

ParameterInput: TypeAlias = "DbParameter | tuple[str, Any]"
ParametersType: TypeAlias = "Iterable[ParameterInput] | Mapping[str, Any] | None"
RowType: TypeAlias = dict[str, Any]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class IsolationLevel(str, Enum):
    """Transaction isolation levels."""

    UNSPECIFIED = "unspecified"
    CHAOS = "chaos"
    READ_UNCOMMITTED = "read_uncommitted"
    READ_COMMITTED = "read_committed"
    REPEATABLE_READ = "repeatable_read"
    SERIALIZABLE = "serializable"
    SNAPSHOT = "snapshot"

    @property
    def sql_name(self) -> str:
        """Name as used in SET TRANSACTION ISOLATION LEVEL statements."""
        return self.value.replace("_", " ").upper()


class ConnectionState(str, Enum):
    """Connection lifecycle states."""

    CLOSED = "closed"
    OPEN = "open"
    CONNECTING = "connecting"
    EXECUTING = "executing"
    FETCHING = "fetching"
    BROKEN = "broken"
