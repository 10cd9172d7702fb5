"""
Module 09D - Block Store

In-memory, ordered file storage for the file-holder service.

Each stored file is one block; its position in insertion order is its
leaf index. The store never keeps a tree: roots and proofs are built
from a snapshot of the contents on every request.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the store taken under its lock."""
    names: list[str]
    contents: list[bytes]

    def index_of(self, name: str) -> int:
        """
        Leaf index of a file.

        Raises:
            KeyError: If the name is not stored
        """
        try:
            return self.names.index(name)
        except ValueError:
            raise KeyError(name) from None


class BlockStore:
    """Thread-safe ordered mapping of file name to content."""

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def put_many(self, files: dict[str, bytes]) -> StoreSnapshot:
        """
        Store files in the given order.

        New names are appended; an existing name keeps its position and
        has its content replaced.
        """
        with self._lock:
            for name, content in files.items():
                self._files[name] = bytes(content)
            return self._snapshot_locked()

    def get(self, name: str) -> bytes | None:
        with self._lock:
            return self._files.get(name)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def clear(self) -> None:
        with self._lock:
            self._files.clear()

    def _snapshot_locked(self) -> StoreSnapshot:
        return StoreSnapshot(
            names=list(self._files.keys()),
            contents=list(self._files.values()),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
