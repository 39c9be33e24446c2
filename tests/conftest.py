"""
Pytest Configuration and Shared Fixtures
=========================================
Common fixtures and configuration for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dirindex import SimpleDirectoryIndex  # noqa: E402


# =============================================================================
# Fixtures: Index
# =============================================================================

@pytest.fixture
def base_dir(tmp_path):
    """An existing, empty base directory."""
    root = tmp_path / "store"
    root.mkdir()
    return root


@pytest.fixture
def index(base_dir):
    """Reference index rooted at base_dir."""
    return SimpleDirectoryIndex(str(base_dir))


@pytest.fixture
def populated_index(index):
    """Index holding the ids a, b and c."""
    for id in ("a", "b", "c"):
        index.add(id)
    return index


# =============================================================================
# Markers Registration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests without external deps")
    config.addinivalue_line("markers", "slow: Slow running tests")
