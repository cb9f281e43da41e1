"""
Error types for doc-examples.

Every failure the package raises is a ``DocExamplesError`` so callers (the
CLI in particular) can catch one type and render it. Errors carry the
underlying exception as ``cause`` and serialize to a dict for structured
logs.

Hierarchy:
    ::

        DocExamplesError
        ├── CommandError            command could not run or exited non-zero
        ├── ExampleExecutionError   a code block failed during traversal
        ├── DocumentError           source document could not be loaded
        └── ConfigError             settings file missing or malformed

Examples:
    >>> err = CommandError("Command failed: python -c 'x'", returncode=1)
    >>> err.to_dict()["returncode"]
    1
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class DocExamplesError(Exception):
    """Base class for all doc-examples errors."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
            result["cause_type"] = type(self.cause).__name__
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class CommandError(DocExamplesError):
    """An external command failed to spawn or exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.returncode = returncode

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["returncode"] = self.returncode
        return result


class ExampleExecutionError(DocExamplesError):
    """A code block inside an examples section failed to execute.

    The message names the source document (empty when unknown) and embeds
    the underlying failure's message.
    """

    def __init__(self, file_path: Path | str | None, cause: BaseException):
        self.file_path = str(file_path) if file_path else ""
        message = (
            "unexpected error. Encountered an error when executing code block. "
            f"File: {self.file_path}. Message: {_message_of(cause)}"
        )
        super().__init__(message, cause=cause)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["file_path"] = self.file_path
        return result


class DocumentError(DocExamplesError):
    """A source document could not be read."""


class ConfigError(DocExamplesError):
    """A settings file could not be loaded."""


def _message_of(exc: BaseException) -> str:
    if isinstance(exc, DocExamplesError):
        return exc.message
    return str(exc)


__all__ = [
    "DocExamplesError",
    "CommandError",
    "ExampleExecutionError",
    "DocumentError",
    "ConfigError",
]
