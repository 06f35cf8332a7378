"""Entry points that pick a merge strategy by format."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Literal

from scaffold_merge.config import (
    FORMAT_BY_SUFFIX,
    PARSE_ERROR_SENTINEL,
    ROOT_SENTINEL,
)
from scaffold_merge.exceptions import ParseError, UnsupportedFormatError
from scaffold_merge.json_codec import dump_json, parse_json
from scaffold_merge.schemas import Mapping, MergeResult
from scaffold_merge.section_merge import merge_sectioned_document
from scaffold_merge.tree_merge import Provenance, collect_paths, merge_trees
from scaffold_merge.yaml_codec import dump_yaml, parse_yaml, parse_yaml_subset

logger = logging.getLogger(__name__)

StructuredFormat = Literal["yaml", "json"]


@dataclass
class MergeOptions:
    """Options for structured merges.

    Attributes:
        yaml_parser: "pyyaml" reads YAML with PyYAML (falling back to the
            subset reader on documents it rejects); "subset" uses only the
            lenient block-subset reader.
    """

    yaml_parser: Literal["pyyaml", "subset"] = "pyyaml"


def merge_structured_tree(
    fmt: StructuredFormat,
    existing: str,
    generated: str,
    *,
    options: MergeOptions | None = None,
) -> MergeResult:
    """Merge two YAML or JSON documents, existing values winning on conflict.

    Args:
        fmt: "yaml" or "json".
        existing: Current on-disk content ("" when the file does not exist).
        generated: Freshly generated content.
        options: Parser options. Uses defaults if None.

    Returns:
        MergeResult with the merged document and dotted key path provenance.

    Raises:
        UnsupportedFormatError: If ``fmt`` is not a structured format.
    """
    opts = options or MergeOptions()
    if fmt == "yaml":
        return _merge_yaml(existing, generated, opts)
    if fmt == "json":
        return _merge_json(existing, generated)
    raise UnsupportedFormatError(f"No structured merge for format {fmt!r}")


def merge_yaml(existing: str, generated: str, *, options: MergeOptions | None = None) -> MergeResult:
    """Merge two YAML documents; see :func:`merge_structured_tree`."""
    return merge_structured_tree("yaml", existing, generated, options=options)


def merge_json(existing: str, generated: str) -> MergeResult:
    """Merge two JSON documents; see :func:`merge_structured_tree`."""
    return merge_structured_tree("json", existing, generated)


def merge_content(
    filename: str | PurePath,
    existing: str,
    generated: str,
    *,
    options: MergeOptions | None = None,
) -> MergeResult:
    """Merge two versions of a file, choosing the strategy from its suffix.

    ``.md``/``.markdown``/``.mdx`` files merge by section, ``.yaml``/``.yml``
    and ``.json`` files merge by key.

    Raises:
        UnsupportedFormatError: If the suffix has no merge strategy.
    """
    suffix = PurePath(filename).suffix.lower()
    fmt = FORMAT_BY_SUFFIX.get(suffix)
    if fmt is None:
        raise UnsupportedFormatError(f"No merge strategy for {str(filename)!r}")
    if fmt == "markdown":
        return merge_sectioned_document(existing, generated)
    return merge_structured_tree(fmt, existing, generated, options=options)


def _merge_yaml(existing: str, generated: str, opts: MergeOptions) -> MergeResult:
    parse = parse_yaml_subset if opts.yaml_parser == "subset" else parse_yaml
    provenance = Provenance()

    if not existing.strip():
        for path in collect_paths(parse(generated)):
            provenance.add(path)
        return provenance.result(generated.strip() + "\n")

    if not generated.strip():
        for path in collect_paths(parse(existing)):
            provenance.preserve(path)
        return provenance.result(existing.strip() + "\n")

    merged, provenance = merge_trees(parse(existing), parse(generated))
    return provenance.result(dump_yaml(merged))


def _merge_json(existing: str, generated: str) -> MergeResult:
    provenance = Provenance()

    if not existing.strip():
        try:
            tree = parse_json(generated)
        except ParseError:
            return provenance.result(generated)
        for path in collect_paths(tree):
            provenance.add(path)
        return provenance.result(dump_json(tree))

    if not generated.strip():
        try:
            tree = parse_json(existing)
        except ParseError:
            return provenance.result(existing)
        for path in collect_paths(tree):
            provenance.preserve(path)
        return provenance.result(dump_json(tree))

    try:
        existing_tree = parse_json(existing)
        generated_tree = parse_json(generated)
    except ParseError as exc:
        logger.warning("Keeping existing JSON unchanged, merge skipped: %s", exc)
        return MergeResult(content=existing, preserved=[PARSE_ERROR_SENTINEL], added=[])

    if not isinstance(existing_tree, Mapping) or not isinstance(generated_tree, Mapping):
        provenance.preserve(ROOT_SENTINEL)
        return provenance.result(dump_json(existing_tree))

    merged, provenance = merge_trees(existing_tree, generated_tree)
    return provenance.result(dump_json(merged))
