"""Tests for merge_sectioned_document."""

from __future__ import annotations

from scaffold_merge.section_merge import merge_sectioned_document


class TestMergeSectionedDocument:
    """Tests for the section-by-section Markdown merge."""

    def test_keeps_existing_adds_new_appends_custom(
        self, readme_existing: str, readme_generated: str
    ) -> None:
        """Matched sections keep existing text, new ones are added, custom ones appended."""
        result = merge_sectioned_document(readme_existing, readme_generated)

        assert result.content == "# Title\nOld\n\n# New Section\nAdded\n\n# Custom\nKeepMe\n"
        assert result.preserved == ["Title", "Custom"]
        assert result.added == ["New Section"]

    def test_follows_generated_order_then_leftovers(self) -> None:
        """Output order is generated order followed by existing-only sections."""
        existing = "# Zeta\nz\n\n# Beta\nb\n\n# Alpha\na\n"
        generated = "# Alpha\nA\n\n# Beta\nB\n\n# Gamma\nG\n"

        result = merge_sectioned_document(existing, generated)

        headers = [line for line in result.content.splitlines() if line.startswith("#")]
        assert headers == ["# Alpha", "# Beta", "# Gamma", "# Zeta"]
        assert "# Alpha\na" in result.content
        assert result.preserved == ["Alpha", "Beta", "Zeta"]
        assert result.added == ["Gamma"]

    def test_headers_match_after_normalization(self) -> None:
        """Punctuation drift in a regenerated header still matches."""
        existing = "## Setup!\nmy custom steps\n"
        generated = "## Setup\ndefault steps\n"

        result = merge_sectioned_document(existing, generated)

        assert result.content == "## Setup!\nmy custom steps\n"
        assert result.preserved == ["Setup!"]
        assert result.added == []

    def test_idempotent_on_identical_input(self) -> None:
        """Merging a document with itself returns it unchanged."""
        document = "Intro line\n\n# One\nfirst\n\n## Two\nsecond\n"

        result = merge_sectioned_document(document, document)

        assert result.content == document
        assert result.preserved == ["One", "Two"]
        assert result.added == []

    def test_empty_existing_returns_generated(self) -> None:
        """With no existing file every generated header is added."""
        generated = "preamble\n# A\na\n## B\nb"

        result = merge_sectioned_document("", generated)

        assert result.content == generated
        assert result.preserved == []
        assert result.added == ["A", "B"]

    def test_empty_generated_returns_existing(self) -> None:
        """With nothing generated the existing file is kept verbatim."""
        existing = "# A\na\n# B\nb"

        result = merge_sectioned_document(existing, "   \n")

        assert result.content == existing
        assert result.preserved == ["A", "B"]
        assert result.added == []

    def test_preamble_only_matches_preamble(self) -> None:
        """A generated preamble never matches a titled section."""
        existing = "# Preamble\ncustom\n"
        generated = "generated intro\n\n# Preamble\ndefault\n"

        result = merge_sectioned_document(existing, generated)

        assert result.content == "generated intro\n\n# Preamble\ncustom\n"
        assert result.preserved == ["Preamble"]
        assert result.added == []

    def test_existing_preamble_is_kept_in_front(self) -> None:
        """An existing preamble survives even when the generated file has none."""
        existing = "hand-written intro\n\n# A\na\n"
        generated = "# A\nnew a\n\n# B\nb\n"

        result = merge_sectioned_document(existing, generated)

        assert result.content == "hand-written intro\n\n# A\na\n\n# B\nb\n"
        assert result.added == ["B"]

    def test_documents_without_headers(self) -> None:
        """Header-less documents merge as preambles and keep the existing text."""
        result = merge_sectioned_document("mine", "theirs")

        assert result.content == "mine\n"
        assert result.preserved == []
        assert result.added == []

    def test_provenance_has_no_duplicates(self) -> None:
        """Repeated generated headers are recorded once."""
        existing = "# Notes\nkeep\n"
        generated = "# Notes\na\n\n# Notes!\nb\n\n# Extra\nc\n\n# Extra\nd\n"

        result = merge_sectioned_document(existing, generated)

        assert result.preserved == ["Notes"]
        assert result.added == ["Extra"]

    def test_duplicate_existing_keys_do_not_crash(self) -> None:
        """The last of several same-named existing sections wins the match."""
        existing = "# Dup\nfirst\n\n# Dup\nsecond\n"
        generated = "# Dup\ngenerated\n"

        result = merge_sectioned_document(existing, generated)

        assert result.content == "# Dup\nsecond\n"
        assert result.preserved == ["Dup"]
