"""
doc-examples

Runs the code blocks found in the examples sections of Markdown
documentation, one at a time, and stops at the first one that fails.

Example:
    >>> import asyncio
    >>> from doc_examples import ExampleRunner, load_document
    >>> asyncio.run(ExampleRunner().run(load_document("README.md")))
"""

__version__ = "0.1.0"

from doc_examples.config import RunnerSettings
from doc_examples.errors import (
    CommandError,
    ConfigError,
    DocExamplesError,
    DocumentError,
    ExampleExecutionError,
)
from doc_examples.executor import CommandResult, run_command
from doc_examples.markdown import load_document, parse_markdown
from doc_examples.nodes import Document, Node, NodeType
from doc_examples.transformer import ExampleRunner, RunReport, run_examples, select_examples

__all__ = [
    "RunnerSettings",
    "CommandError",
    "ConfigError",
    "DocExamplesError",
    "DocumentError",
    "ExampleExecutionError",
    "CommandResult",
    "run_command",
    "load_document",
    "parse_markdown",
    "Document",
    "Node",
    "NodeType",
    "ExampleRunner",
    "RunReport",
    "run_examples",
    "select_examples",
    "__version__",
]
