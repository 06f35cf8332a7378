"""Split Markdown documents into header-delimited sections and back."""

from __future__ import annotations

import re
from typing import Iterable

from scaffold_merge.config import MAX_HEADER_LEVEL
from scaffold_merge.schemas import Section
from scaffold_merge.schemas.sections import normalize_header

_HEADER_RE = re.compile(r"^(#{1,%d})[ \t]+(\S.*?)\s*$" % MAX_HEADER_LEVEL)

__all__ = [
    "headers_match",
    "normalize_header",
    "parse_sections",
    "render_section",
    "render_sections",
]


def headers_match(first: str, second: str) -> bool:
    """Return True when two header texts refer to the same section."""
    return normalize_header(first) == normalize_header(second)


def parse_sections(text: str) -> list[Section]:
    """Parse a document into an ordered list of sections.

    Each header line (1-6 ``#`` followed by whitespace and text) opens a new
    section whose body runs up to the next header line. Lines before the first
    header become a preamble section when they hold any non-whitespace text.

    Args:
        text: The raw document.

    Returns:
        Sections in document order; a document without headers yields a single
        preamble section (or nothing when it is blank).
    """
    sections: list[Section] = []
    preamble_lines: list[str] = []
    current: Section | None = None
    body_lines: list[str] = []

    for line in text.split("\n"):
        match = _HEADER_RE.match(line)
        if match is None:
            if current is None:
                preamble_lines.append(line)
            else:
                body_lines.append(line)
            continue

        if current is not None:
            sections.append(current.model_copy(update={"body": "\n".join(body_lines)}))
        current = Section(
            header_text=match.group(2),
            level=len(match.group(1)),
            raw_header_line=line,
        )
        body_lines = []

    if current is not None:
        sections.append(current.model_copy(update={"body": "\n".join(body_lines)}))

    preamble = "\n".join(preamble_lines)
    if preamble.strip():
        sections.insert(0, Section(body=preamble))
    return sections


def render_section(section: Section) -> str:
    """Serialize a single section back into text."""
    return section.text


def render_sections(sections: Iterable[Section]) -> str:
    """Join sections with a blank line and end with exactly one newline."""
    blocks = [render_section(section).rstrip() for section in sections]
    return "\n\n".join(block for block in blocks if block).strip() + "\n"
