"""Read and write YAML documents as generic trees.

Two parsers produce the same :class:`Mapping` tree:

* :func:`parse_yaml` goes through PyYAML's composer, so any valid YAML is read
  correctly, while plain scalars are typed by :func:`coerce_scalar`.
* :func:`parse_yaml_subset` is a lenient, indentation-driven reader for the
  block subset that generated scaffolding files use. It never raises and is
  the fallback whenever PyYAML rejects a document.

:func:`dump_yaml` writes block-style YAML with two-space indentation. Comments,
anchors and flow collections do not survive a parse/dump cycle.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

import yaml

from scaffold_merge.config import INDENT_WIDTH, MAX_NESTING_DEPTH
from scaffold_merge.exceptions import NestingTooDeepError
from scaffold_merge.schemas import Mapping, Scalar, ScalarValue, Sequence, StructuredNode

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(
    r"""^(?P<key>"(?:[^"\\]|\\.)*"|'(?:[^']|'')*'|[^\s"'#].*?)\s*:(?:\s+(?P<value>.*))?$"""
)
_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")
_ESCAPE_RE = re.compile(r"\\(.)")

_NESTED_MARKERS = frozenset({"", "|", ">", "|-", "|+", ">-", ">+"})
_NULL_WORDS = frozenset({"null", "Null", "NULL", "~", ""})
_UNESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "/": "/"}
_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_INDICATORS = ("{", "[", "'", '"', "&", "*", "!", "|", ">", "%", "@", "`", "- ", "? ")


def coerce_scalar(text: str) -> ScalarValue:
    """Type a scalar the way it reads in a block YAML document.

    Quoted text is returned literally (quotes removed, escapes undone);
    ``true``/``false`` in any case become booleans; ``null``, ``~`` and the
    empty string become None; text that is entirely a number becomes an int or
    float; anything else stays a string.
    """
    value = text.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return _unquote(value)
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if value in _NULL_WORDS:
        return None
    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)
    return value


def format_scalar(value: ScalarValue) -> str:
    """Format a scalar for a ``key: value`` or ``- value`` line."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if _needs_quotes(value) or not isinstance(coerce_scalar(value), str):
        return _quote(value)
    return value


def _format_key(key: str) -> str:
    return _quote(key) if _needs_quotes(key) else key


def _needs_quotes(text: str) -> bool:
    return (
        text == ""
        or text != text.strip()
        or ":" in text
        or "#" in text
        or "\n" in text
        or "\r" in text
        or text == "-"
        or text.startswith(_INDICATORS)
    )


def _quote(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(char, char) for char in text) + '"'


def _unquote(text: str) -> str:
    inner = text[1:-1]
    if text[0] == "'":
        return inner.replace("''", "'")
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), inner)


class _Line(NamedTuple):
    indent: int
    text: str
    number: int


def _tokenize(text: str) -> list[_Line]:
    lines: list[_Line] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped in ("---", "...") or stripped.startswith("--- "):
            logger.debug("Ignoring YAML document marker on line %d", number)
            continue
        lines.append(_Line(len(raw) - len(raw.lstrip()), stripped, number))
    return lines


def _is_item(text: str) -> bool:
    return text == "-" or text.startswith("- ")


class _SubsetParser:
    """Recursive descent over pre-tokenized, indentation-tagged lines."""

    def __init__(self, text: str) -> None:
        self.lines = _tokenize(text)
        self.pos = 0
        self.depth = 0

    def parse(self) -> Mapping:
        entries: dict[str, StructuredNode] = {}
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            node = self._parse_block(line.indent)
            if isinstance(node, Mapping):
                entries.update(node.entries)
            else:
                logger.debug("Dropping top-level sequence starting on line %d", line.number)
        return Mapping(entries)

    def _peek(self) -> _Line | None:
        return self.lines[self.pos] if self.pos < len(self.lines) else None

    def _parse_block(self, indent: int) -> StructuredNode:
        line = self.lines[self.pos]
        if self.depth >= MAX_NESTING_DEPTH:
            logger.debug("Skipping block nested too deeply on line %d", line.number)
            while (line := self._peek()) is not None and line.indent >= indent:
                self.pos += 1
            return Mapping()
        self.depth += 1
        try:
            if _is_item(line.text):
                return self._parse_sequence(indent)
            return self._parse_mapping(indent)
        finally:
            self.depth -= 1

    def _parse_mapping(self, indent: int) -> Mapping:
        entries: dict[str, StructuredNode] = {}
        while (line := self._peek()) is not None:
            if line.indent < indent:
                break
            if line.indent > indent:
                logger.debug("Skipping stray indented line %d: %r", line.number, line.text)
                self.pos += 1
                continue
            if _is_item(line.text):
                break
            self.pos += 1
            match = _KEY_RE.match(line.text)
            if match is None:
                logger.debug("Skipping unparseable line %d: %r", line.number, line.text)
                continue
            key = match.group("key")
            if key[0] in "\"'":
                key = _unquote(key)
            entries[key] = self._parse_value((match.group("value") or "").strip(), indent)
        return Mapping(entries)

    def _parse_value(self, raw: str, indent: int) -> StructuredNode:
        raw = _strip_anchor(raw)
        if raw in _NESTED_MARKERS:
            following = self._peek()
            if following is not None:
                if following.indent > indent:
                    return self._parse_block(following.indent)
                if following.indent == indent and _is_item(following.text):
                    return self._parse_sequence(indent)
            return Mapping()
        return _inline_node(raw)

    def _parse_sequence(self, indent: int) -> Sequence:
        items: list[StructuredNode] = []
        while (line := self._peek()) is not None:
            if line.indent > indent:
                logger.debug("Skipping stray indented line %d: %r", line.number, line.text)
                self.pos += 1
                continue
            if line.indent < indent or not _is_item(line.text):
                break
            body = line.text[1:].strip()
            rest = _strip_anchor(body)
            if _is_item(rest) or _KEY_RE.match(rest):
                # Re-read the item body as a block starting at its own column,
                # so continuation keys aligned with it join the same mapping.
                column = indent + len(line.text) - len(body)
                self.lines[self.pos] = _Line(column, rest, line.number)
                items.append(self._parse_block(column))
                continue
            self.pos += 1
            if rest:
                node = _inline_node(rest)
            else:
                following = self._peek()
                if following is not None and following.indent > indent:
                    node = self._parse_block(following.indent)
                else:
                    node = Scalar(None)
            items.append(node)
        return Sequence(items)


def _strip_anchor(raw: str) -> str:
    if raw.startswith("&"):
        parts = raw.split(None, 1)
        return parts[1] if len(parts) > 1 else ""
    return raw


def _inline_node(raw: str) -> StructuredNode:
    if raw == "[]":
        return Sequence()
    if raw == "{}":
        return Mapping()
    if raw.startswith(("[", "{", "*")):
        # Flow collections and aliases are kept verbatim as strings.
        logger.debug("Keeping unsupported construct %r as text", raw)
        return Scalar(raw)
    return Scalar(coerce_scalar(raw))


def parse_yaml_subset(text: str) -> Mapping:
    """Parse the block-style YAML subset used by generated scaffolding files.

    Supported: ``key: value`` scalars, nested mappings opened by ``key:`` (also
    ``key: |`` / ``key: >``, whose content is read as a nested block), ``- value``
    sequence items and ``- key: value`` mapping items with aligned continuation
    keys. ``[]`` and ``{}`` read as empty collections. Other flow collections
    and aliases are kept as their raw text, document markers are skipped and
    anchors are ignored. Blocks nested deeper than ``MAX_NESTING_DEPTH`` are
    skipped.

    Never raises: lines that cannot be interpreted are skipped.
    """
    return _SubsetParser(text).parse()


def parse_yaml(text: str) -> Mapping:
    """Parse a YAML document into a :class:`Mapping` tree.

    The document is composed with PyYAML and its node graph converted to the
    generic tree. Plain scalars are typed by :func:`coerce_scalar` and keys are
    always strings, so e.g. a GitHub Actions ``on:`` key stays ``"on"``. An
    empty ``key:`` opens an empty mapping, as in the subset grammar.

    Documents PyYAML rejects, documents nested deeper than
    ``MAX_NESTING_DEPTH`` and documents whose root is not a mapping are read
    with :func:`parse_yaml_subset` instead. Never raises.
    """
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
        if root is None:
            return Mapping()
        if not isinstance(root, yaml.MappingNode):
            logger.debug("YAML root is a %s, using subset parser", root.id)
            return parse_yaml_subset(text)
        return _convert_mapping(root, set())
    except (yaml.YAMLError, NestingTooDeepError, RecursionError) as exc:
        logger.debug("PyYAML could not read document, using subset parser: %s", exc)
        return parse_yaml_subset(text)


def _convert_node(node: yaml.Node, active: set[int]) -> StructuredNode:
    if id(node) in active:
        logger.debug("Dropping recursive alias at %s", node.start_mark)
        return Scalar(None)
    if isinstance(node, yaml.MappingNode):
        return _convert_mapping(node, active)
    if isinstance(node, yaml.SequenceNode):
        _check_depth(node, active)
        active.add(id(node))
        try:
            return Sequence([_convert_node(item, active) for item in node.value])
        finally:
            active.discard(id(node))
    if node.style is None:
        return Scalar(coerce_scalar(node.value))
    return Scalar(node.value)


def _convert_mapping(node: yaml.MappingNode, active: set[int]) -> Mapping:
    _check_depth(node, active)
    active.add(id(node))
    entries: dict[str, StructuredNode] = {}
    try:
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                logger.debug("Dropping complex mapping key at %s", key_node.start_mark)
                continue
            if (
                isinstance(value_node, yaml.ScalarNode)
                and value_node.style is None
                and value_node.value == ""
            ):
                entries[key_node.value] = Mapping()
            else:
                entries[key_node.value] = _convert_node(value_node, active)
    finally:
        active.discard(id(node))
    return Mapping(entries)


def _check_depth(node: yaml.Node, active: set[int]) -> None:
    # Containers being converted are exactly the ancestors of this node.
    if len(active) >= MAX_NESTING_DEPTH:
        raise NestingTooDeepError(f"YAML nests deeper than {MAX_NESTING_DEPTH} levels at {node.start_mark}")


def dump_yaml(mapping: Mapping) -> str:
    """Serialize a tree as block-style YAML ending with a newline.

    Nested non-empty mappings and sequences open an indented block, empty ones
    are written as ``{}`` / ``[]``. A mapping inside a sequence puts its first
    key on the ``- `` line and aligns the remaining keys under it.
    """
    if not mapping.entries:
        return "{}\n"
    return "\n".join(_dump_mapping(mapping, 0)) + "\n"


def _dump_mapping(mapping: Mapping, depth: int) -> list[str]:
    pad = " " * (INDENT_WIDTH * depth)
    lines: list[str] = []
    for key, value in mapping.entries.items():
        label = f"{pad}{_format_key(key)}:"
        if isinstance(value, Mapping) and value.entries:
            lines.append(label)
            lines.extend(_dump_mapping(value, depth + 1))
        elif isinstance(value, Sequence) and value.items:
            lines.append(label)
            lines.extend(_dump_sequence(value, depth + 1))
        else:
            lines.append(f"{label} {_inline(value)}")
    return lines


def _dump_sequence(sequence: Sequence, depth: int) -> list[str]:
    pad = " " * (INDENT_WIDTH * depth)
    lines: list[str] = []
    for item in sequence.items:
        if isinstance(item, Mapping) and item.entries:
            nested = _dump_mapping(item, depth + 1)
        elif isinstance(item, Sequence) and item.items:
            nested = _dump_sequence(item, depth + 1)
        else:
            lines.append(f"{pad}- {_inline(item)}")
            continue
        lines.append(f"{pad}- {nested[0].lstrip()}")
        lines.extend(nested[1:])
    return lines


def _inline(node: StructuredNode) -> str:
    if isinstance(node, Mapping):
        return "{}"
    if isinstance(node, Sequence):
        return "[]"
    return format_scalar(node.value)
