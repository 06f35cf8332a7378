"""Custom exceptions for scaffold_merge."""


class ScaffoldMergeError(Exception):
    """Base exception for scaffold_merge operations."""


class ParseError(ScaffoldMergeError):
    """Error while parsing structured input."""


class UnsupportedFormatError(ScaffoldMergeError):
    """No merge strategy exists for the requested format."""


class NestingTooDeepError(ParseError):
    """Structured input nests deeper than the supported limit."""
