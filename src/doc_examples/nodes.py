"""
Document node types.

A document is an ordered list of block-level nodes plus the path of the
file it came from. Only two node types matter to the example runner:
raw ``html`` nodes (region markers) and ``code`` nodes. Everything else is
carried through untouched.

Example:
    >>> doc = Document([Node(NodeType.CODE, value="print(1)", lang="python")])
    >>> doc.children[0].is_code("python")
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class NodeType:
    """Node type names produced by the Markdown front-end."""

    HTML = "html"
    CODE = "code"
    HEADING = "heading"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class Node:
    """One block of a parsed document.

    Attributes:
        type: Node type name (see ``NodeType``)
        value: Literal text of the block (markup, code body, paragraph text)
        lang: Declared language of a code block
        line: 1-based line where the block starts, when known
    """

    type: str
    value: str | None = None
    lang: str | None = None
    line: int | None = None

    def is_marker(self, text: str) -> bool:
        """Check if this is a raw markup node whose value is exactly ``text``."""
        return self.type == NodeType.HTML and self.value == text

    def is_code(self, lang: str) -> bool:
        """Check if this is a code block declared as ``lang`` (case-sensitive)."""
        return self.type == NodeType.CODE and self.lang == lang


@dataclass
class Document:
    """Ordered node sequence and the path of its source file.

    Attributes:
        children: Nodes in document order
        path: Source file path, or None for in-memory documents
    """

    children: list[Node] = field(default_factory=list)
    path: Path | None = None

    def __post_init__(self):
        if isinstance(self.path, str):
            # An empty string means no known path
            self.path = Path(self.path) if self.path else None

    @property
    def dirname(self) -> Path | None:
        """Directory containing the source file, if the path is known."""
        if self.path is None:
            return None
        return self.path.parent

    def __len__(self) -> int:
        return len(self.children)
