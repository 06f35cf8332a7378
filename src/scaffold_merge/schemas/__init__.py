"""Shared schemas for scaffold_merge."""

from scaffold_merge.schemas.merge import MergeResult
from scaffold_merge.schemas.sections import Section
from scaffold_merge.schemas.tree import (
    Mapping,
    Scalar,
    ScalarValue,
    Sequence,
    StructuredNode,
    from_python,
    to_python,
)

__all__ = [
    "Mapping",
    "MergeResult",
    "Scalar",
    "ScalarValue",
    "Section",
    "Sequence",
    "StructuredNode",
    "from_python",
    "to_python",
]
