"""
Pytest configuration and shared fixtures for the reserves tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_clients = importlib.import_module("fixtures.clients")

make_client_entry = _clients.make_client_entry
make_client_list = _clients.make_client_list


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def client_list():
    """Five deterministic clients."""
    return make_client_list(5)


@pytest.fixture
def single_client_list():
    """A client list with exactly one client."""
    return make_client_list(1)


@pytest.fixture
def merkle_tree(client_list):
    """Tree built over the five-client list with default settings."""
    from reserves.merkle import compute_merkle_tree
    return compute_merkle_tree(client_list)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
