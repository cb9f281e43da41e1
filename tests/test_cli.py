"""Tests for the doc-examples CLI."""

import shutil

import pytest
from click.testing import CliRunner

from doc_examples import __version__
from doc_examples.cli import cli

pytestmark = pytest.mark.integration


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(monkeypatch, tmp_path):
    """Run every command from tmp_path with no DOC_EXAMPLES_* overrides."""
    monkeypatch.chdir(tmp_path)
    for key in ("DOC_EXAMPLES_LANG", "DOC_EXAMPLES_EXECUTABLE", "DOC_EXAMPLES_DEBUG"):
        monkeypatch.delenv(key, raising=False)


class TestRunCommand:
    """Tests for `doc-examples run`."""

    def test_runs_examples(self, cli_runner, sample_readme_path, tmp_path):
        shutil.copy(sample_readme_path, tmp_path / "README.md")

        result = cli_runner.invoke(cli, ["run", "README.md"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "first\n"
        assert "second" in result.stderr
        assert "Ran 2 example(s) from 1 file(s)" in result.stderr

    def test_stops_at_first_failure(self, cli_runner, write_markdown):
        write_markdown(
            '<section class="examples">\n\n'
            "```python\nprint('one')\n```\n\n"
            "```python\nraise SystemExit(4)\n```\n\n"
            "```python\nprint('three')\n```\n"
        )

        result = cli_runner.invoke(cli, ["run", "README.md"])

        assert result.exit_code == 1
        assert result.stdout == "one\n"
        assert "unexpected error. Encountered an error when executing code block. File: README.md." in result.stderr
        assert "Command failed" in result.stderr

    def test_later_files_not_run_after_failure(self, cli_runner, write_markdown):
        write_markdown('<section class="examples">\n\n```python\nraise SystemExit(1)\n```\n', name="a.md")
        write_markdown('<section class="examples">\n\n```python\nprint("b")\n```\n', name="b.md")

        result = cli_runner.invoke(cli, ["run", "a.md", "b.md"])

        assert result.exit_code == 1
        assert result.stdout == ""

    def test_missing_document(self, cli_runner):
        result = cli_runner.invoke(cli, ["run", "missing.md"])

        assert result.exit_code == 1
        assert "Cannot read document missing.md" in result.stderr

    def test_lang_option(self, cli_runner, write_markdown):
        write_markdown('<section class="examples">\n\n```py\nprint(42)\n```\n\n```python\nprint(0)\n```\n')

        result = cli_runner.invoke(cli, ["run", "--lang", "py", "README.md"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "42\n"

    def test_config_file(self, cli_runner, write_markdown, tmp_path):
        write_markdown('<section class="examples">\n\n```py3\nprint("cfg")\n```\n')
        (tmp_path / "settings.yaml").write_text("lang: py3\n")

        result = cli_runner.invoke(cli, ["run", "--config", "settings.yaml", "README.md"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "cfg\n"

    def test_invalid_config_file(self, cli_runner, write_markdown, tmp_path):
        write_markdown("text\n")
        (tmp_path / "settings.yaml").write_text("- not a mapping\n")

        result = cli_runner.invoke(cli, ["run", "--config", "settings.yaml", "README.md"])

        assert result.exit_code == 1
        assert "must contain a mapping" in result.stderr

    def test_debug_logs_to_stderr(self, cli_runner, write_markdown):
        write_markdown('<section class="examples">\n\n```python\nprint("x")\n```\n')

        result = cli_runner.invoke(cli, ["run", "--debug", "--json-logs", "README.md"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "x\n"
        assert "examples_section_found" in result.stderr

    def test_requires_files(self, cli_runner):
        result = cli_runner.invoke(cli, ["run"])
        assert result.exit_code == 2


class TestListCommand:
    """Tests for `doc-examples list`."""

    def test_lists_qualifying_blocks(self, cli_runner, sample_readme_path, tmp_path):
        shutil.copy(sample_readme_path, tmp_path / "README.md")

        result = cli_runner.invoke(cli, ["list", "README.md"])

        assert result.exit_code == 0, result.output
        assert "2 example(s)" in result.stdout
        assert "import sys" in result.stdout
        assert "SystemExit" not in result.stdout

    def test_lang_option(self, cli_runner, sample_readme_path, tmp_path):
        shutil.copy(sample_readme_path, tmp_path / "README.md")

        result = cli_runner.invoke(cli, ["list", "--lang", "javascript", "README.md"])

        assert result.exit_code == 0, result.output
        assert "1 example(s)" in result.stdout


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
