"""
Minimal block-level Markdown scanner.

Produces the flat node list the examples runner walks. Only block
structure is recognised; inline markup is left as paragraph text.

Recognised blocks:
    - fenced code (three or more backticks or tildes) -> ``code`` node,
      ``lang`` is the first word of the info string
    - lines starting with ``<`` -> ``html`` node running to the next blank line
    - ATX headings (``#`` .. ``######``) -> ``heading`` node
    - any other run of non-blank lines -> ``paragraph`` node

Fences, headings, comments and block-level HTML tags interrupt a paragraph;
inline tags such as ``<span>`` do not. Lines end at ``\\n``, ``\\r\\n`` or
``\\r`` only. An unclosed fence runs to the end of the document.

Example:
    >>> nodes = parse_markdown('<section class="examples">\\n\\n```python\\nprint(1)\\n```\\n')
    >>> [n.type for n in nodes]
    ['html', 'code']
"""

from __future__ import annotations

import re
from pathlib import Path

from doc_examples.errors import DocumentError
from doc_examples.nodes import Document, Node, NodeType

FENCE_RE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
HTML_RE = re.compile(r"^ {0,3}<")
HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?!#)(?:[ \t]+(?P<text>.*?))?[ \t#]*$")
# Block-level tag names; any other tag cannot interrupt a paragraph
BLOCK_TAGS = frozenset("""
    address article aside base basefont blockquote body caption center col
    colgroup dd details dialog dir div dl dt fieldset figcaption figure footer
    form frame frameset h1 h2 h3 h4 h5 h6 head header hr html iframe legend li
    link main menu menuitem nav noframes ol optgroup option p param search
    section summary table tbody td tfoot th thead title tr track ul
    pre script style textarea
""".split())
HTML_INTERRUPT_RE = re.compile(r"^ {0,3}<(?:!|\?|/?(?P<tag>[A-Za-z][A-Za-z0-9-]*)(?:[\s/>]|$))")
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _starts_block_html(line: str) -> bool:
    match = HTML_INTERRUPT_RE.match(line)
    if match is None:
        return False
    tag = match.group("tag")
    return tag is None or tag.lower() in BLOCK_TAGS


def _interrupts_paragraph(line: str) -> bool:
    return bool(FENCE_RE.match(line) or HEADING_RE.match(line) or _starts_block_html(line))


def _split_lines(text: str) -> list[str]:
    """Split on line endings only, keeping other separators inside lines."""
    lines = LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _closes_fence(line: str, fence: str) -> bool:
    stripped = line.lstrip(" ")
    if len(line) - len(stripped) > 3:
        return False
    stripped = stripped.rstrip()
    return (
        len(stripped) >= len(fence)
        and set(stripped) == {fence[0]}
    )


def parse_markdown(text: str) -> list[Node]:
    """Split Markdown ``text`` into block nodes, in document order."""
    lines = _split_lines(text)
    nodes: list[Node] = []
    i = 0

    while i < len(lines):
        line = lines[i]

        if _is_blank(line):
            i += 1
            continue

        start = i + 1

        fence_match = FENCE_RE.match(line)
        if fence_match:
            fence = fence_match.group("fence")
            indent = len(fence_match.group("indent"))
            info = fence_match.group("info").strip()
            lang = info.split()[0] if info else None

            body: list[str] = []
            i += 1
            while i < len(lines) and not _closes_fence(lines[i], fence):
                body_line = lines[i]
                # Remove up to the opening fence's indentation
                strip = min(indent, len(body_line) - len(body_line.lstrip(" ")))
                body.append(body_line[strip:])
                i += 1
            i += 1  # closing fence

            nodes.append(Node(NodeType.CODE, value="\n".join(body), lang=lang, line=start))
            continue

        if HTML_RE.match(line):
            block = []
            while i < len(lines) and not _is_blank(lines[i]):
                block.append(lines[i])
                i += 1
            nodes.append(Node(NodeType.HTML, value="\n".join(block).strip(), line=start))
            continue

        heading_match = HEADING_RE.match(line)
        if heading_match:
            nodes.append(
                Node(NodeType.HEADING, value=heading_match.group("text") or "", line=start)
            )
            i += 1
            continue

        paragraph = [line.strip()]
        i += 1
        while i < len(lines) and not _is_blank(lines[i]) and not _interrupts_paragraph(lines[i]):
            paragraph.append(lines[i].strip())
            i += 1
        nodes.append(Node(NodeType.PARAGRAPH, value="\n".join(paragraph), line=start))

    return nodes


def load_document(path: Path | str) -> Document:
    """Read a Markdown file into a Document.

    Raises:
        DocumentError: If the file cannot be read or decoded as UTF-8
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Cannot read document {path}: {e}", cause=e) from e
    return Document(children=parse_markdown(text), path=path)
