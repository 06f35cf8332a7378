"""Merge regenerated Markdown documents section by section."""

from __future__ import annotations

import logging

from scaffold_merge.schemas import MergeResult, Section
from scaffold_merge.sections import parse_sections, render_sections
from scaffold_merge.tree_merge import Provenance

logger = logging.getLogger(__name__)


def merge_sectioned_document(existing: str, generated: str) -> MergeResult:
    """Merge two Markdown documents, keeping customized sections.

    Strategy:
    1. Parse both documents into sections keyed by normalized header.
    2. Walk the generated sections in order: when the existing document has a
       section with the same key, its text is kept verbatim; otherwise the
       generated section is added.
    3. Existing sections that the generated document does not mention are
       appended in their original order.

    Args:
        existing: Current on-disk content ("" when the file does not exist).
        generated: Freshly generated content.

    Returns:
        MergeResult with the merged content and header provenance. The preamble
        is never listed in provenance.
    """
    provenance = Provenance()

    if not existing.strip():
        for section in parse_sections(generated):
            if not section.is_preamble:
                provenance.add(section.header_text)
        return provenance.result(generated)

    if not generated.strip():
        for section in parse_sections(existing):
            if not section.is_preamble:
                provenance.preserve(section.header_text)
        return provenance.result(existing)

    existing_sections = parse_sections(existing)
    generated_sections = parse_sections(generated)

    existing_by_key: dict[str, Section] = {}
    for section in existing_sections:
        existing_by_key[section.key] = section

    used_keys: set[str] = set()
    merged: list[Section] = []

    for section in generated_sections:
        match = existing_by_key.get(section.key)
        if match is not None:
            merged.append(match)
            used_keys.add(section.key)
            if not match.is_preamble:
                provenance.preserve(match.header_text)
        else:
            merged.append(section)
            if not section.is_preamble:
                provenance.add(section.header_text)

    for section in existing_sections:
        if section.key in used_keys:
            continue
        if section.is_preamble:
            # A preamble only makes sense at the top of the document.
            merged.insert(0, section)
            continue
        merged.append(section)
        provenance.preserve(section.header_text)

    logger.debug(
        "Merged %d existing and %d generated sections into %d",
        len(existing_sections),
        len(generated_sections),
        len(merged),
    )
    return provenance.result(render_sections(merged))
