"""
Shared pytest fixtures for doc-examples tests.

This module provides:
- Logging isolation (structlog reset around every test)
- A recording command runner that never spawns processes
- Settings pinned to a temporary working directory
- Sample Markdown documents
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure doc_examples package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from doc_examples.config import RunnerSettings
from doc_examples.errors import CommandError
from doc_examples.executor import CommandResult


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests that spawn real processes."""
    for item in items:
        if "real_settings" in getattr(item, "fixturenames", ()):
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Logging Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def quiet_structlog() -> Generator[None, None, None]:
    """
    Keep structlog silent unless a test configures it.

    Tests that call ``configure_logging`` bind the logger to that test's
    stderr; resetting afterwards keeps later tests from writing to a
    closed capture stream.
    """
    structlog.reset_defaults()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Command Runner Fixtures
# =============================================================================


class RecordingRunner:
    """
    Fake command runner.

    Records every (command, cwd) pair, returns queued results in order
    (a successful empty result once the queue is exhausted) and tracks how
    many commands were in flight at once.
    """

    def __init__(self, results: list[CommandResult] | None = None):
        self.results = list(results or [])
        self.calls: list[tuple[str, Path]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, command: str, cwd: Path) -> CommandResult:
        self.calls.append((command, cwd))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # Yield to the loop so overlapping calls would be visible
            await asyncio.sleep(0)
            if self.results:
                return self.results.pop(0)
            return CommandResult()
        finally:
            self.in_flight -= 1

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """Runner that succeeds with empty output for every command."""
    return RecordingRunner()


@pytest.fixture
def failing_result() -> CommandResult:
    """Result of a command that exited with status 1."""
    return CommandResult(
        stderr="Traceback: boom\n",
        error=CommandError("Command failed: fake -c 'boom'\nTraceback: boom\n", returncode=1),
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> RunnerSettings:
    """Settings with a fake interpreter and a temporary fallback cwd."""
    return RunnerSettings(executable="fake-python", eval_flag="-c", lang="python", cwd=tmp_path)


@pytest.fixture
def real_settings(tmp_path) -> RunnerSettings:
    """Settings that run blocks with the current interpreter."""
    return RunnerSettings(executable=sys.executable, eval_flag="-c", lang="python", cwd=tmp_path)


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def fixtures_path() -> Path:
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_readme_path(fixtures_path) -> Path:
    """Markdown file with one examples section holding two python blocks."""
    return fixtures_path / "sample_readme.md"


@pytest.fixture
def write_markdown(tmp_path):
    """Write Markdown text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "README.md") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
