"""Test setup for scaffold_merge."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def readme_existing() -> str:
    """Previously generated README with a user-edited and a custom section."""
    return "# Title\nOld\n\n# Custom\nKeepMe\n"


@pytest.fixture
def readme_generated() -> str:
    """Regenerated README with a changed body and a new section."""
    return "# Title\nNew\n\n# New Section\nAdded\n"
