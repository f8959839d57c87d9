"""
Pytest configuration and shared fixtures for mountain range tests.

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

_common = importlib.import_module("fixtures.common")

make_digest = _common.make_digest
make_digests = _common.make_digests
make_tree = _common.make_tree
CountingHasher = _common.CountingHasher

from mmr_core.config.runtime import set_default_config
from mmr_core.crypto.field import Sha256FieldHasher


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_default_config():
    """Drop any cached process-wide config between tests."""
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def hasher():
    """Provide the default field hasher."""
    return Sha256FieldHasher()


@pytest.fixture
def counting_hasher():
    """Provide a hasher that counts its evaluations."""
    return CountingHasher()


@pytest.fixture
def tree(hasher):
    """Provide an empty tree."""
    from mmr_core.merkle.mountain_range import MerkleMountainRange

    return MerkleMountainRange(hasher)


@pytest.fixture
def ten_leaf_tree(hasher):
    """Provide the ten-leaf tree (leaves 1..17, peaks 15 and 18)."""
    return make_tree(10, hasher)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
