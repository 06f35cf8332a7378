"""Format-agnostic merge of two structured trees (existing values win)."""

from __future__ import annotations

from scaffold_merge.schemas import Mapping, MergeResult, Scalar, Sequence, StructuredNode


class Provenance:
    """Ordered, duplicate-free record of preserved and added identifiers."""

    def __init__(self) -> None:
        self._preserved: dict[str, None] = {}
        self._added: dict[str, None] = {}

    @property
    def preserved(self) -> list[str]:
        return list(self._preserved)

    @property
    def added(self) -> list[str]:
        return list(self._added)

    def preserve(self, identifier: str) -> None:
        self._preserved.setdefault(identifier, None)

    def add(self, identifier: str) -> None:
        self._added.setdefault(identifier, None)

    def result(self, content: str) -> MergeResult:
        return MergeResult(content=content, preserved=self.preserved, added=self.added)


def join_path(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def merge_trees(
    existing: Mapping,
    generated: Mapping,
    path: str = "",
    provenance: Provenance | None = None,
) -> tuple[Mapping, Provenance]:
    """Deep merge two mappings, with existing values taking priority.

    Rules per key:
    - only in generated: the generated value is added (its descendants are not
      listed separately);
    - only in existing: the existing value is preserved;
    - mapping on both sides: merged recursively;
    - anything else (scalars, sequences, mismatched types): existing wins and
      the generated value is discarded.

    The result lists existing keys in their original order, followed by the
    keys that only the generated side defines.

    Args:
        existing: Tree parsed from the current file.
        generated: Tree parsed from the regenerated content.
        path: Dotted prefix of the mappings being merged ("" for the root).
        provenance: Accumulator shared across recursive calls.

    Returns:
        Tuple of (merged mapping, provenance).
    """
    provenance = provenance if provenance is not None else Provenance()
    entries: dict[str, StructuredNode] = {}

    for key, current in existing.entries.items():
        full_path = join_path(path, key)
        if key not in generated.entries:
            entries[key] = current
            provenance.preserve(full_path)
            continue

        incoming = generated.entries[key]
        if isinstance(current, Mapping) and isinstance(incoming, Mapping):
            entries[key], _ = merge_trees(current, incoming, full_path, provenance)
        elif isinstance(current, (Mapping, Sequence, Scalar)):
            entries[key] = current
            provenance.preserve(full_path)
        else:
            raise TypeError(f"Unknown tree node at {full_path}: {type(current).__name__}")

    for key, incoming in generated.entries.items():
        if key not in existing.entries:
            entries[key] = incoming
            provenance.add(join_path(path, key))

    return Mapping(entries), provenance


def collect_paths(node: StructuredNode, path: str = "") -> list[str]:
    """List every dotted key path of a tree, descending into nested mappings."""
    paths: list[str] = []
    if not isinstance(node, Mapping):
        return paths
    for key, value in node.entries.items():
        full_path = join_path(path, key)
        paths.append(full_path)
        paths.extend(collect_paths(value, full_path))
    return paths
