# ABOUTME: Shared Markdown rendering for normalized documents: headings, tables, rich text, legacy HTML
# ABOUTME: Pure string functions used by every platform extractor and by the document assembler

import re
from collections.abc import Iterable, Sequence
from typing import Any

BLOCK_SEPARATOR = "\n\n"
DIVIDER = "---"

_TAG = re.compile(r"<[^>]*>")

# Decoded in this order, so "&amp;lt;" becomes "<"
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)


def render_heading(level: int, text: str) -> str:
    """Prefix trimmed text with `level` hashes; levels outside 1-6 render as plain text."""
    text = text.strip()
    if 1 <= level <= 6:
        return f"{'#' * level} {text}"
    return text


def render_bullet(text: str) -> str:
    return f"• {text}"


def render_numbered(text: str) -> str:
    # Literal "1." for every item, no counter
    return f"1. {text}"


def render_todo(text: str, checked: bool) -> str:
    return f"{'[x]' if checked else '[ ]'} {text}"


def render_code(text: str, language: str = "") -> str:
    return f"```{language}\n{text}\n```"


def render_quote(text: str) -> str:
    return f"> {text}"


def render_callout(text: str, emoji: str) -> str:
    return f"{emoji} {text}"


def render_table(rows: Sequence[Sequence[str]]) -> str:
    """Render a grid of cell strings as a Markdown table.

    Empty cells become a single space so column alignment stays parseable. A
    separator row follows the first row when that row has at least one column.

    Args:
        rows: Cell text, row by row

    Returns:
        Newline joined table rows without a trailing newline
    """
    lines: list[str] = []

    for index, row in enumerate(rows):
        cells = [cell.strip() or " " for cell in row]
        lines.append(f"| {' | '.join(cells)} |")

        if index == 0 and cells:
            lines.append(f"| {' | '.join('---' for _ in cells)} |")

    return "\n".join(lines)


def render_rich_text(runs: Iterable[dict[str, Any]] | None) -> str:
    """Concatenate the raw text of each rich text run. Styles and links are dropped."""
    if not runs:
        return ""

    parts = []
    for run in runs:
        text = run.get("text") if isinstance(run, dict) else None
        content = text.get("content") if isinstance(text, dict) else None
        parts.append(content if isinstance(content, str) else "")

    return "".join(parts)


def strip_html(html: str) -> str:
    """Flatten storage-format HTML to text.

    Tags are removed by pattern, not parsed: a `>` inside an attribute value or a
    tag broken across lines is not handled.
    """
    text = _TAG.sub("", html)
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return text.strip()


def collect_blocks(rendered: Iterable[Iterable[str]]) -> list[str]:
    """Flatten per-node renderings, dropping blocks that are only whitespace."""
    return [block for blocks in rendered for block in blocks if block.strip()]


def join_blocks(blocks: Iterable[str]) -> str:
    """Join rendered blocks into document content, one blank line apart."""
    return BLOCK_SEPARATOR.join(blocks)
