"""Read and write JSON documents as generic trees."""

from __future__ import annotations

import json

from scaffold_merge.config import INDENT_WIDTH, MAX_NESTING_DEPTH
from scaffold_merge.exceptions import ParseError
from scaffold_merge.schemas import StructuredNode, from_python, to_python


def parse_json(text: str) -> StructuredNode:
    """Parse JSON text into a tree.

    Raises:
        ParseError: If the text is not valid JSON or nests deeper than
            ``MAX_NESTING_DEPTH``.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseError("Invalid JSON: nesting too deep") from exc
    return from_python(value, max_depth=MAX_NESTING_DEPTH)


def dump_json(node: StructuredNode) -> str:
    """Serialize a tree as JSON with two-space indentation and a trailing newline."""
    return json.dumps(to_python(node), indent=INDENT_WIDTH, ensure_ascii=False) + "\n"
