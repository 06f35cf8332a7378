"""Shared constants for scaffold_merge."""

from __future__ import annotations

from typing import Final

# Key of the implicit section that precedes the first header of a document.
PREAMBLE_KEY: Final[str] = "__preamble__"

# Provenance identifiers recorded instead of key paths.
ROOT_SENTINEL: Final[str] = "(root)"
PARSE_ERROR_SENTINEL: Final[str] = "(parse error - kept existing)"

INDENT_WIDTH: Final[int] = 2
MAX_HEADER_LEVEL: Final[int] = 6

FORMAT_BY_SUFFIX: Final[dict[str, str]] = {
    ".md": "markdown",
    ".markdown": "markdown",
    ".mdx": "markdown",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}

# Deepest structured nesting accepted from input; deeper documents are read
# leniently (YAML) or rejected as unparseable (JSON).
MAX_NESTING_DEPTH: Final[int] = 100
