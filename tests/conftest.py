"""
Pytest configuration and shared fixtures for BlockProof tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


SENTENCE = "You trust, me, right?"
EIGHT_WORDS = "one two three four five six seven eight"


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def sentence():
    """The four-word sentence used throughout the examples."""
    return SENTENCE


@pytest.fixture
def words():
    """Blocks of the four-word sentence."""
    return [b"You", b"trust,", b"me,", b"right?"]


@pytest.fixture
def eight_words():
    """Eight distinct word blocks (a full power-of-two tree)."""
    return [w.encode("utf-8") for w in EIGHT_WORDS.split()]


@pytest.fixture
def make_blocks():
    """Factory for `n` distinct blocks."""
    def _make(n: int) -> list[bytes]:
        return [f"block-{i}".encode("utf-8") for i in range(n)]
    return _make


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep BLOCKPROOF_* variables from the host out of every test."""
    for key in list(os.environ):
        if key.startswith("BLOCKPROOF_"):
            monkeypatch.delenv(key, raising=False)


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
