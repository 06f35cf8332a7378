"""Header-delimited document section model."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from scaffold_merge.config import PREAMBLE_KEY

_NORMALIZE_RE = re.compile(r"[^a-z0-9\s]")


def normalize_header(text: str) -> str:
    """Normalize header text for comparison.

    Lowercases, drops everything that is not a letter, digit or whitespace and
    trims, so ``"Setup!"`` matches ``"setup"`` but ``"Set up"`` does not.
    """
    return _NORMALIZE_RE.sub("", text.lower()).strip()


class Section(BaseModel):
    """One header-delimited unit of a Markdown document.

    The preamble (text before the first header) is represented as a section
    with ``level == 0`` and an empty ``raw_header_line``.
    """

    header_text: str = PREAMBLE_KEY
    level: int = Field(0, ge=0, le=6)
    raw_header_line: str = ""
    body: str = ""

    @property
    def is_preamble(self) -> bool:
        return self.level == 0

    @property
    def key(self) -> str:
        """Identity used to match sections across documents."""
        if self.is_preamble:
            return PREAMBLE_KEY
        return normalize_header(self.header_text)

    @property
    def text(self) -> str:
        """The section's original span of text."""
        if self.is_preamble:
            return self.body
        if self.body:
            return f"{self.raw_header_line}\n{self.body}"
        return self.raw_header_line
