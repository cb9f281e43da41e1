"""
CLI for doc-examples.

Runs the examples sections of Markdown files, or lists the code blocks
that would run.

Usage:
    doc-examples run README.md docs/usage.md
    doc-examples run --lang python --debug README.md
    doc-examples list README.md
"""

import asyncio
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from doc_examples import __version__
from doc_examples.config import RunnerSettings
from doc_examples.errors import DocExamplesError
from doc_examples.logging import bind_context, clear_context, configure_logging, get_logger
from doc_examples.markdown import load_document
from doc_examples.transformer import ExampleRunner, select_examples

logger = get_logger(__name__)


def _load_settings(config: str | None, **overrides) -> RunnerSettings:
    if config:
        return RunnerSettings.from_yaml(Path(config), **overrides)
    return RunnerSettings(**{k: v for k, v in overrides.items() if v is not None})


def _err_console() -> Console:
    return Console(stderr=True)


def _print_error(console: Console, message: str) -> None:
    console.print("✖ " + message, style="bold red", markup=False, highlight=False, soft_wrap=True)


@click.group()
@click.version_option(version=__version__)
def cli():
    """Run the code examples embedded in Markdown documentation."""
    pass


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("--lang", "-l", default=None, help="Language of code blocks to run (default: python).")
@click.option("--executable", "-e", default=None, help="Interpreter used to run each block.")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option("--json-logs/--console-logs", default=None, help="Log format (default: auto).")
def run(
    files: tuple,
    lang: str | None,
    executable: str | None,
    config: str | None,
    debug: bool,
    json_logs: bool | None,
):
    """Execute the examples sections of FILES, in order.

    Stops at the first failing code block.

    Examples:
        doc-examples run README.md
        doc-examples run -l python docs/*.md
    """
    err_console = _err_console()

    try:
        settings = _load_settings(
            config, lang=lang, executable=executable, debug=debug or None, json_logs=json_logs
        )
    except DocExamplesError as e:
        _print_error(err_console, e.message)
        sys.exit(1)

    configure_logging(level=settings.effective_log_level, json_format=settings.json_logs)
    runner = ExampleRunner(settings=settings)

    executed = 0
    for file_path in files:
        bind_context(file=file_path)
        try:
            document = load_document(file_path)
            report = asyncio.run(runner.run(document))
        except DocExamplesError as e:
            logger.error("run_failed", **e.to_dict())
            _print_error(err_console, e.message)
            sys.exit(1)
        finally:
            clear_context()
        executed += report.blocks_executed

    err_console.print(
        f"[green]✔[/green] Ran {executed} example(s) from {len(files)} file(s)",
        highlight=False,
    )


@cli.command(name="list")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--lang", "-l", default=None, help="Language of code blocks to list (default: python).")
def list_examples(files: tuple, lang: str | None):
    """List the code blocks `run` would execute, without running them."""
    settings = RunnerSettings(**({"lang": lang} if lang else {}))
    console = Console()

    table = Table()
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Lang")
    table.add_column("First line")

    count = 0
    for file_path in files:
        try:
            document = load_document(file_path)
        except DocExamplesError as e:
            _print_error(_err_console(), e.message)
            sys.exit(1)

        for node in select_examples(document, settings):
            first_line = node.value.splitlines()[0] if node.value else ""
            table.add_row(file_path, str(node.line or ""), node.lang, first_line)
            count += 1

    console.print(table)
    console.print(f"[bold]{count}[/bold] example(s)")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
