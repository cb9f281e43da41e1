"""
Settings for the example runner.

Everything the runner would otherwise read from the process (interpreter
path, working directory) is a field here, so the core can be driven with
explicit values in tests.

Settings resolve from, in order: keyword arguments, ``DOC_EXAMPLES_*``
environment variables, a ``.env`` file, then the defaults below. A YAML
file can be loaded with ``RunnerSettings.from_yaml``.

Examples:
    >>> settings = RunnerSettings(lang="python", debug=True)
    >>> settings.effective_log_level
    'DEBUG'
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from doc_examples.errors import ConfigError

EXAMPLES_BEGIN = '<section class="examples">'
EXAMPLES_END = "<!-- /.examples -->"


class RunnerSettings(BaseSettings):
    """Configuration inputs of the example runner.

    Fields
    ──────
    executable   : Interpreter used to run each code block
    eval_flag    : Flag telling the interpreter to evaluate its argument as a program
    lang         : Code block language that qualifies for execution
    begin_marker : Raw markup opening an examples section
    end_marker   : Raw markup closing an examples section
    cwd          : Working directory for documents without a known path
    log_level    : structlog level
    debug        : Force DEBUG logging
    json_logs    : JSON logs (True), console logs (False), auto (None)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOC_EXAMPLES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Execution ────────────────────────────────────────────────
    executable: str = Field(default_factory=lambda: sys.executable)
    eval_flag: str = "-c"
    lang: str = "python"
    cwd: Path = Field(default_factory=lambda: Path(os.getcwd()))

    # ── Examples section markers ─────────────────────────────────
    begin_marker: str = EXAMPLES_BEGIN
    end_marker: str = EXAMPLES_END

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    debug: bool = False
    json_logs: bool | None = None

    @property
    def effective_log_level(self) -> str:
        """Log level after applying ``debug``."""
        if self.debug:
            return "DEBUG"
        return self.log_level.upper()

    @classmethod
    def from_yaml(cls, yaml_path: Path | str, **overrides: Any) -> "RunnerSettings":
        """Load settings from a YAML mapping.

        Args:
            yaml_path: Path to YAML settings file
            **overrides: Values that take precedence over the file

        Returns:
            RunnerSettings instance

        Raises:
            ConfigError: If the file is missing, not a mapping, or invalid
        """
        path = Path(yaml_path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}", cause=e) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")

        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in {path}: {e}", cause=e) from e
