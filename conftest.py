"""Global pytest configuration and fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def source_tree_root() -> Path:
    """Return the root of the source tree."""
    # Get the directory of this conftest.py file, which should be at the root
    return Path(__file__).parent


@pytest.fixture
def bundled_site_root(source_tree_root: Path) -> Path:
    """Return the directory holding the bundled counter page."""
    return source_tree_root / "counter_e2e" / "static"
