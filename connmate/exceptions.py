"""Exceptions for command execution."""

from typing import Any

DEFAULT_FAILURE_MESSAGE = "Failed to run command"


class ConnMateError(Exception):
    """Base exception for connmate errors."""

    pass


class InvalidArgumentError(ConnMateError, ValueError):
    """Raised when a required argument is missing, before any I/O."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' must not be None")


class CommandExecutionError(ConnMateError):
    """Raised when binding, executing or committing a command fails.

    The driver error is kept as ``original_error`` and as ``__cause__``.
    """

    def __init__(
        self,
        message: str = DEFAULT_FAILURE_MESSAGE,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class ScalarCoercionError(ConnMateError, TypeError):
    """Raised when a scalar result cannot be converted to the requested type."""

    def __init__(self, value: Any, target_type: Any) -> None:
        self.value = value
        self.target_type = target_type
        type_name = getattr(target_type, "__name__", repr(target_type))
        super().__init__(
            f"Cannot convert value {value!r} of type "
            f"{type(value).__name__} to {type_name}"
        )


class OperationCancelledError(ConnMateError):
    """Raised when the cancellation signal is set before a step starts."""

    pass


class ConnectionNotOpenError(ConnMateError, RuntimeError):
    """Raised when an adapter is used while its connection is closed."""

    pass
