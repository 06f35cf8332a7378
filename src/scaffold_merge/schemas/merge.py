"""Merge output model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MergeResult(BaseModel):
    """Outcome of merging an existing file with freshly generated content.

    Attributes:
        content: The merged text, ready to be written back.
        preserved: Identifiers (header text or dotted key path) kept from the
            existing side, in first-seen order.
        added: Identifiers newly introduced from the generated side.
    """

    content: str
    preserved: list[str] = Field(default_factory=list)
    added: list[str] = Field(default_factory=list)
