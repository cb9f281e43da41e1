"""
Examples runner: executes the code blocks of a document's examples section.

Walks the nodes of a parsed document once, in order. Raw markup nodes equal
to the begin/end markers switch an "inside examples" flag; every code block
declared in the configured language and found inside an examples section is
run as a standalone program with the configured interpreter, and whatever
it printed is forwarded to our own stdout/stderr.

Manifesto:
    Examples in documentation rot unless something runs them. This module
    runs them exactly the way a reader would: one after another, in the
    order they appear, each as its own program in the document's directory.
    The first broken example stops the run.

Architecture:
    ::

        Document.children
              │
              ▼
        for node in children ──► html == begin marker ──► inside = True
              │                  html == end marker   ──► inside = False
              │
              ├──► inside and code(lang) ──► await runner(cmd, cwd)
              │                                   │
              │                     error ◄───────┤
              │                       │           └──► emit stdout / stderr
              │                       ▼
              │             ExampleExecutionError (stop)
              ▼
        RunReport

Guardrails:
    - Single quotes in a code block are replaced with double quotes before
      the block is wrapped in single quotes for the shell. Blocks whose
      meaning depends on a single quote character will be altered.
    - No timeout: a block that never exits stalls the run.

Examples:
    >>> runner = ExampleRunner()
    >>> report = await runner.run(load_document(Path("README.md")))
    >>> report.blocks_executed
    3
"""

from __future__ import annotations

import asyncio
import re
import sys
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from doc_examples.config import RunnerSettings
from doc_examples.errors import DocExamplesError, ExampleExecutionError
from doc_examples.executor import CommandRunner, run_command
from doc_examples.logging import get_logger
from doc_examples.nodes import Document, Node

logger = get_logger(__name__)

RE_TRAILING_EOL = re.compile(r"\r?\n\Z")


@dataclass
class RunReport:
    """Summary of one traversal."""

    file_path: str
    nodes_total: int = 0
    blocks_executed: int = 0


def strip_trailing_eol(text: str) -> str:
    """Remove exactly one trailing ``\\n`` or ``\\r\\n``."""
    return RE_TRAILING_EOL.sub("", text, count=1)


def build_command(script: str, executable: str, eval_flag: str) -> str:
    """Build the shell command line that evaluates ``script``.

    Single quotes in ``script`` become double quotes so the script can be
    wrapped in single quotes as one shell argument.
    """
    script = script.replace("'", '"')
    return " ".join([executable, eval_flag, "'" + script + "'"])


def select_examples(document: Document, settings: RunnerSettings) -> Iterator[Node]:
    """Yield the code blocks of ``document`` that lie inside an examples section.

    Lazy: node *i+1* is not looked at until the consumer asks for the next
    block, so a consumer that stops early leaves the rest of the document
    unvisited. A second begin marker keeps the section open; an end marker
    outside a section is a no-op.
    """
    total = len(document.children)
    inside = False
    for idx, node in enumerate(document.children):
        logger.debug("processing_node", index=idx + 1, total=total, node_type=node.type)

        if node.is_marker(settings.begin_marker):
            logger.debug("examples_section_found")
            inside = True
        elif node.is_marker(settings.end_marker):
            logger.debug("examples_section_finished")
            inside = False
        elif inside and node.is_code(settings.lang):
            logger.debug("code_block_found", lang=node.lang, line=node.line)
            yield node


class ExampleRunner:
    """Run the examples-section code blocks of documents.

    One instance can run any number of documents; the inside-examples flag
    and node position live in each ``run`` call, never on the instance.

    Args:
        settings: Executable, flag, language, markers and fallback cwd
        runner: Command runner, ``run_command`` by default
        stdout: Stream for example stdout (``sys.stdout`` at emit time if None)
        stderr: Stream for example stderr (``sys.stderr`` at emit time if None)
    """

    def __init__(
        self,
        settings: RunnerSettings | None = None,
        runner: CommandRunner | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.settings = settings or RunnerSettings()
        self.runner = runner or run_command
        self._stdout = stdout
        self._stderr = stderr

    async def run(self, document: Document) -> RunReport:
        """Process every node of ``document`` in order.

        Returns:
            RunReport for the document

        Raises:
            ExampleExecutionError: On the first code block that fails; no
                further nodes are processed.
        """
        file_path = str(document.path) if document.path else ""
        report = RunReport(file_path=file_path, nodes_total=len(document.children))

        logger.debug("processing_file", file=file_path, nodes=report.nodes_total)

        for node in select_examples(document, self.settings):
            await self._execute(node, document, file_path)
            report.blocks_executed += 1

        logger.debug("finished_file", file=file_path, executed=report.blocks_executed)
        return report

    def transform(
        self,
        document: Document,
        callback: Callable[[DocExamplesError | None], None],
    ) -> None:
        """Run ``document`` and report the outcome to ``callback`` exactly once.

        ``callback(None)`` after all nodes are processed, or
        ``callback(error)`` with the first execution failure. When called from
        inside a running event loop, the traversal runs on a worker thread
        with its own loop and this call blocks until it finishes.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            in_loop = False
        else:
            in_loop = True

        try:
            if in_loop:
                with ThreadPoolExecutor(max_workers=1) as pool:
                    pool.submit(asyncio.run, self.run(document)).result()
            else:
                asyncio.run(self.run(document))
        except DocExamplesError as e:
            callback(e)
            return
        callback(None)

    async def _execute(self, node: Node, document: Document, file_path: str) -> None:
        command = build_command(node.value or "", self.settings.executable, self.settings.eval_flag)
        cwd = document.dirname or self.settings.cwd

        logger.debug("executing_code_block", cwd=str(cwd))
        result = await self.runner(command, Path(cwd))

        if result.error is not None:
            logger.debug("code_block_failed", error=result.error.message)
            raise ExampleExecutionError(file_path, result.error) from result.error

        stdout = self._stdout if self._stdout is not None else sys.stdout
        stderr = self._stderr if self._stderr is not None else sys.stderr
        if result.stdout:
            print(strip_trailing_eol(result.stdout), file=stdout)
        if result.stderr:
            print(strip_trailing_eol(result.stderr), file=stderr)

        logger.debug("finished_code_block")


async def run_examples(
    document: Document,
    settings: RunnerSettings | None = None,
    runner: CommandRunner | None = None,
) -> RunReport:
    """Run the examples of one document with a throwaway ``ExampleRunner``."""
    return await ExampleRunner(settings=settings, runner=runner).run(document)
