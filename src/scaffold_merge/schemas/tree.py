"""Generic tree shared by the structured (YAML / JSON) codecs.

A parsed document is a :class:`Mapping` whose values are :class:`Scalar`,
:class:`Mapping` or :class:`Sequence` nodes. Mapping keys are unique and keep
insertion order for serialization; merging matches them by equality only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from scaffold_merge.exceptions import NestingTooDeepError

ScalarValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class Scalar:
    value: ScalarValue = None


@dataclass(frozen=True)
class Mapping:
    entries: dict[str, "StructuredNode"] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> "StructuredNode":
        return self.entries[key]

    def keys(self) -> list[str]:
        return list(self.entries)


@dataclass(frozen=True)
class Sequence:
    items: list["StructuredNode"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)


StructuredNode = Union[Scalar, Mapping, Sequence]


def from_python(value: Any, max_depth: Optional[int] = None, _depth: int = 0) -> StructuredNode:
    """Build a tree from plain Python containers (dict / list / scalars).

    Keys are converted to strings; values of unknown types become their string
    form.

    Raises:
        NestingTooDeepError: If containers nest deeper than ``max_depth``.
    """
    if isinstance(value, (dict, list, tuple)) and max_depth is not None and _depth >= max_depth:
        raise NestingTooDeepError(f"Nesting deeper than {max_depth} levels")
    if isinstance(value, dict):
        return Mapping({str(key): from_python(item, max_depth, _depth + 1) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return Sequence([from_python(item, max_depth, _depth + 1) for item in value])
    if value is None or isinstance(value, (str, int, float, bool)):
        return Scalar(value)
    return Scalar(str(value))


def to_python(node: StructuredNode) -> Any:
    """Convert a tree back into plain Python containers."""
    if isinstance(node, Mapping):
        return {key: to_python(item) for key, item in node.entries.items()}
    if isinstance(node, Sequence):
        return [to_python(item) for item in node.items]
    if isinstance(node, Scalar):
        return node.value
    raise TypeError(f"Unknown tree node: {type(node).__name__}")
