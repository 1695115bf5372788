"""Command execution: lifecycle helper, transactional runner, result shapers."""

from .executor import CommandExecutor
from .lifecycle import begin_transaction, open_connection
from .runner import with_command
from .shapers import execute, execute_reader, execute_scalar, with_data_reader

__all__ = [
    "CommandExecutor",
    "begin_transaction",
    "execute",
    "execute_reader",
    "execute_scalar",
    "open_connection",
    "with_command",
    "with_data_reader",
]
