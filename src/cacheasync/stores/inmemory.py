"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: stores/inmemory.py.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from ..types import CacheEntry

T = TypeVar("T")


class InMemoryEntryStore(Generic[T]):
    """Process-local dict store; the default backend."""

    backend_id: str = "inmemory"

    def __init__(self) -> None:
        self._rows: dict[str, CacheEntry[T]] = {}

    def get(self, group: str) -> CacheEntry[T] | None:
        return self._rows.get(group)

    def set(self, group: str, entry: CacheEntry[T] | None = None) -> None:
        if entry is None:
            self._rows.pop(group, None)
            return
        self._rows[group] = entry

    def clear(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, group: object) -> bool:
        return group in self._rows
