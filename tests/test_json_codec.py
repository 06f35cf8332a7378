"""Tests for the JSON codec."""

from __future__ import annotations

import pytest

from scaffold_merge.config import MAX_NESTING_DEPTH
from scaffold_merge.exceptions import NestingTooDeepError, ParseError
from scaffold_merge.json_codec import dump_json, parse_json
from scaffold_merge.schemas import Mapping, Scalar, Sequence


class TestParseJson:
    """Tests for parse_json."""

    def test_parses_object(self) -> None:
        """Objects become mappings, arrays sequences, values scalars."""
        tree = parse_json('{"a": [1, "x", null], "b": {"c": true}}')

        assert tree == Mapping(
            {
                "a": Sequence([Scalar(1), Scalar("x"), Scalar(None)]),
                "b": Mapping({"c": Scalar(True)}),
            }
        )

    def test_non_object_root(self) -> None:
        """Roots other than objects are returned as they are."""
        assert parse_json("[1]") == Sequence([Scalar(1)])
        assert parse_json('"text"') == Scalar("text")

    @pytest.mark.parametrize("text", ["{not json", "", "{'single': 1}"])
    def test_raises_parse_error(self, text: str) -> None:
        """Invalid JSON raises ParseError."""
        with pytest.raises(ParseError, match="Invalid JSON"):
            parse_json(text)

    def test_runaway_nesting_raises_parse_error(self) -> None:
        """Nesting that would exhaust the stack is reported as invalid JSON."""
        with pytest.raises(ParseError, match="nesting too deep"):
            parse_json("[" * 100_000)

    def test_nesting_past_limit_raises(self) -> None:
        """Valid JSON nested past the limit is rejected as a ParseError."""
        depth = MAX_NESTING_DEPTH + 1

        with pytest.raises(NestingTooDeepError):
            parse_json("[" * depth + "]" * depth)

    def test_nesting_at_limit_is_read(self) -> None:
        """Nesting up to the limit is accepted."""
        depth = MAX_NESTING_DEPTH

        tree = parse_json("[" * depth + "]" * depth)

        assert isinstance(tree, Sequence)


class TestDumpJson:
    """Tests for dump_json."""

    def test_two_space_indent_and_newline(self) -> None:
        """Output uses two-space indentation and ends with a newline."""
        tree = Mapping({"a": Scalar(1), "b": Sequence([Scalar("é")])})

        assert dump_json(tree) == '{\n  "a": 1,\n  "b": [\n    "é"\n  ]\n}\n'

    def test_keeps_key_order(self) -> None:
        """Keys are written in tree order."""
        assert dump_json(parse_json('{"z": 1, "a": 2}')) == '{\n  "z": 1,\n  "a": 2\n}\n'
