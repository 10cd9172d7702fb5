"""
Module 09D - API Dependencies

Dependency injection for the API.
Provides the process-wide block store.
"""

from __future__ import annotations

from api.store import BlockStore


_store = BlockStore()


def get_store() -> BlockStore:
    """Return the block store shared by all requests."""
    return _store
