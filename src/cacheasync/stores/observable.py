"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Copy-on-write entry store that notifies subscribers on every change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Generic, TypeVar

from ..types import CacheEntry

T = TypeVar("T")

logger = logging.getLogger("cacheasync.stores")

# Called with the changed group, or `None` when every group was cleared.
StoreListener = Callable[[str | None], None]


class ObservableEntryStore(Generic[T]):
    """
    Store whose whole mapping is replaced on each write.

    Readers holding an `entries` snapshot never see it mutate, which lets
    reactive consumers compare snapshots by identity. Listeners are invoked
    synchronously after the new snapshot is visible.
    """

    backend_id: str = "observable"

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry[T]] = {}
        self._listeners: list[StoreListener] = []

    @property
    def entries(self) -> Mapping[str, CacheEntry[T]]:
        """Read-only view of the current snapshot."""
        return MappingProxyType(self._entries)

    def get(self, group: str) -> CacheEntry[T] | None:
        return self._entries.get(group)

    def set(self, group: str, entry: CacheEntry[T] | None = None) -> None:
        updated = dict(self._entries)
        if entry is None:
            if group not in updated:
                return
            del updated[group]
        else:
            updated[group] = entry
        self._entries = updated
        self._notify(group)

    def clear(self) -> None:
        self._entries = {}
        self._notify(None)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register `listener` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, group: str | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(group)
            except Exception:
                logger.exception("Entry store listener failed (group=%r)", group)
