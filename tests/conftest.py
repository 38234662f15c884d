"""
Pytest configuration and shared fixtures for privacy pool tests.

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

make_snapshot = _common.make_snapshot
MockProofBackend = _common.MockProofBackend
InMemoryLedger = _common.InMemoryLedger

from core.config.runtime import PoolConfig
from core.crypto.hashing import Sha256FieldHasher
from core.merkle.zero_ladder import clear_zero_ladder_cache
from core.witness.builder import WitnessBuilder


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def hasher():
    """Provide the SHA-256 field hasher."""
    return Sha256FieldHasher()


@pytest.fixture
def pool_config():
    """Provide a small-height pool configuration."""
    return PoolConfig(tree_height=4)


@pytest.fixture
def builder(hasher, pool_config):
    """Provide a WitnessBuilder over the small pool."""
    return WitnessBuilder(hasher, pool_config)


@pytest.fixture
def snapshot(hasher):
    """Provide three deposits and their records."""
    return make_snapshot(3, hasher)


@pytest.fixture
def proof_backend():
    """Provide a proof backend that proves every witness."""
    return MockProofBackend()


@pytest.fixture
def ledger(proof_backend):
    """Provide an empty in-memory ledger verifying with proof_backend."""
    return InMemoryLedger(backend=proof_backend)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep POOL_* variables from the host out of every test."""
    import os
    for name in list(os.environ):
        if name.startswith("POOL_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fresh_ladder_cache():
    """Clear cached zero ladders before and after the test."""
    clear_zero_ladder_cache()
    yield
    clear_zero_ladder_cache()


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
