"""scaffold_merge: merge regenerated scaffolding files without losing edits."""

from scaffold_merge.exceptions import ParseError, ScaffoldMergeError, UnsupportedFormatError
from scaffold_merge.file_merge import merge_into_file
from scaffold_merge.merge import (
    MergeOptions,
    merge_content,
    merge_json,
    merge_structured_tree,
    merge_yaml,
)
from scaffold_merge.schemas import MergeResult, Section
from scaffold_merge.section_merge import merge_sectioned_document

__all__ = [
    "MergeOptions",
    "MergeResult",
    "ParseError",
    "ScaffoldMergeError",
    "Section",
    "UnsupportedFormatError",
    "merge_content",
    "merge_into_file",
    "merge_json",
    "merge_sectioned_document",
    "merge_structured_tree",
    "merge_yaml",
]
