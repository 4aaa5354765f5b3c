"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: stores/base.py.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeAlias, TypeVar, runtime_checkable

from ..types import CacheEntry

T = TypeVar("T")


@runtime_checkable
class EntryStore(Protocol[T]):
    """
    Per-function slot storage consumed by the cache lifecycle engine.

    `set` must be synchronous and immediately visible to `get` for the same
    group. Passing no entry clears the group's slot.
    """

    backend_id: str

    def get(self, group: str) -> CacheEntry[T] | None: ...

    def set(self, group: str, entry: CacheEntry[T] | None = None) -> None: ...

    def clear(self) -> None: ...


StoreFactory: TypeAlias = Callable[[], EntryStore]
