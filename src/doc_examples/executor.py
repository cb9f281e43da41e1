"""
Shell command execution.

Runs one command through the shell with ``asyncio`` subprocesses and hands
back what it wrote. Failures never raise: a non-zero exit or a spawn error
is returned as ``CommandResult.error`` so the caller decides what is fatal.

There is no timeout and no cancellation. A command that never exits keeps
the awaiting caller suspended.

Example:
    >>> result = await run_command("python -c 'print(1)'", Path("."))
    >>> result.stdout
    '1\\n'
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from doc_examples.errors import CommandError
from doc_examples.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Captured output of one command.

    Attributes:
        stdout: Standard output text
        stderr: Standard error text
        error: Failure of the command, None when it exited with status 0
    """

    stdout: str = ""
    stderr: str = ""
    error: CommandError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CommandRunner(Protocol):
    """Anything that can run a shell command in a directory."""

    async def __call__(self, command: str, cwd: Path) -> CommandResult: ...


async def run_command(command: str, cwd: Path) -> CommandResult:
    """Run ``command`` through the shell in ``cwd`` and capture its output.

    Args:
        command: Shell command line
        cwd: Working directory of the child process

    Returns:
        CommandResult with decoded stdout/stderr and, on failure, a CommandError
    """
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.debug("command_spawn_failed", cwd=str(cwd), error=str(e))
        return CommandResult(error=CommandError(str(e), cause=e))

    stdout_bytes, stderr_bytes = await process.communicate()
    stdout = stdout_bytes.decode("utf-8", errors="replace")
    stderr = stderr_bytes.decode("utf-8", errors="replace")

    if process.returncode != 0:
        logger.debug("command_failed", returncode=process.returncode)
        error = CommandError(
            f"Command failed: {command}\n{stderr}",
            returncode=process.returncode,
        )
        return CommandResult(stdout=stdout, stderr=stderr, error=error)

    return CommandResult(stdout=stdout, stderr=stderr)
