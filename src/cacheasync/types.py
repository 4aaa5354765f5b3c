"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache entry record, expiry sentinels, and shared type aliases.
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass, field
from typing import Any, Generic, NamedTuple, TypeAlias, TypeVar

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Expiry sentinels (milliseconds on the cache clock)
# ---------------------------------------------------------------------------

NEVER_EXPIRES = -1.0
EXPIRED = 0.0


class _Missing(enum.Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing.MISSING
"""Marker for an entry that has no recorded value."""

PrimitiveKey: TypeAlias = str | int | float | bool | None
ResolverResult: TypeAlias = PrimitiveKey | tuple[PrimitiveKey, ...] | list[PrimitiveKey]
Resolver: TypeAlias = Callable[..., ResolverResult]
Producer: TypeAlias = Callable[..., Awaitable[Any]]
Clock: TypeAlias = Callable[[], float]


class SharedResult(Generic[T]):
    """
    Awaitable handle shared by every caller of one cache entry.

    Each await goes through `asyncio.shield`, so cancelling one waiter leaves
    the underlying future running for the others.
    """

    __slots__ = ("_future",)

    def __init__(self, future: asyncio.Future[T]) -> None:
        self._future = future

    @property
    def future(self) -> asyncio.Future[T]:
        return self._future

    def done(self) -> bool:
        return self._future.done()

    def result(self) -> T:
        return self._future.result()

    def exception(self) -> BaseException | None:
        return self._future.exception()

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.shield(self._future).__await__()

    def __repr__(self) -> str:
        return f"<SharedResult {self._future!r}>"


class KeyTuple(NamedTuple):
    """Resolved `(group, key)` pair; both parts are always strings."""

    group: str
    key: str


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """
    Snapshot of the single cache slot held for one group.

    Attributes:
        key: Key-within-group the entry was created for.
        promise: Future of the producer result backing this entry.
        handle: Shielded awaitable returned to callers of this entry.
        settled: Whether the future completed and the entry was updated.
        expire_at: Expiry timestamp in ms, `NEVER_EXPIRES`, or `EXPIRED`.
        token: Generation token identifying this installed entry.
        value: Last successful result, or `MISSING`.
        metadata: Free-form per-entry data carried across reloads.
    """

    key: str
    promise: asyncio.Future[T]
    handle: SharedResult[T]
    settled: bool
    expire_at: float
    token: int
    value: T | _Missing = MISSING
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def has_value(self) -> bool:
        """Whether a successful result has been recorded."""
        return self.value is not MISSING

    @property
    def is_pending(self) -> bool:
        """Whether the producer call behind this entry is still unsettled."""
        return not self.settled
