"""Error taxonomy for ops-tools operations.

"Not found" conditions (a tool missing from PATH, no matching release
asset) are not errors: resolvers return ``None`` for them so callers can
fall through to the next strategy.
"""

from __future__ import annotations

from typing import Optional

UNKNOWN_ERROR = "unknown error"


def first_line(text: Optional[str], default: str = UNKNOWN_ERROR) -> str:
    """Return the first non-empty line of ``text``, or ``default``."""
    if text:
        for line in text.splitlines():
            stripped = line.strip()
            if stripped:
                return stripped
    return default


class OperationError(Exception):
    """Base class for all ops-tools operation failures."""


class IoError(OperationError):
    """Filesystem failure tied to a specific path."""

    def __init__(self, path: object, cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"I/O error ({self.path}): {cause}")


class CommandError(OperationError):
    """An external program could not be run or exited unsuccessfully."""

    def __init__(self, command: str, message: str):
        self.command = command
        self.message = message
        super().__init__(f"Command '{command}' failed: {message}")


class ConfigError(OperationError):
    """Configuration or remote metadata is missing or malformed."""

    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"Configuration error [{key}]: {message}")


class CancelledError(OperationError):
    """The user declined a confirmation prompt."""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message)


class NotARepositoryError(OperationError):
    """The starting directory is not inside a git repository."""

    def __init__(self, path: object):
        self.path = str(path)
        super().__init__(f"Not a git repository (or any parent directory): {self.path}")


class InvalidPathError(OperationError):
    """A path given on the command line does not name an existing directory."""

    def __init__(self, path: object):
        self.path = str(path)
        super().__init__(f"Not an existing directory: {self.path}")
