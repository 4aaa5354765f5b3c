"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Entry lifecycle engine: reload, freshness, dedup, and guarded settlement.
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import itertools
import logging
import math
import time
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from .errors import CacheOptionsError, MissingValueError
from .metrics import CacheMetrics, NoOpCacheMetrics
from .options import CacheOptions
from .stores.base import EntryStore
from .types import (
    EXPIRED,
    MISSING,
    NEVER_EXPIRES,
    CacheEntry,
    Clock,
    Producer,
    SharedResult,
)

T = TypeVar("T")

logger = logging.getLogger("cacheasync.engine")


def monotonic_ms() -> float:
    """Default cache clock in milliseconds."""
    return time.monotonic() * 1000.0


class CacheLifecycle(Generic[T]):
    """
    Owns the per-group entry state machine for one wrapped producer.

    Each group moves between absent, pending, settled-fresh and
    settled-stale. Every installed entry gets a new token, and a settlement
    callback only writes back while the store still holds its token.
    """

    def __init__(
        self,
        producer: Producer,
        store: EntryStore[T],
        *,
        options: CacheOptions,
        metrics: CacheMetrics | None = None,
        clock: Clock | None = None,
        name: str = "cached",
    ) -> None:
        self._producer = producer
        self._store = store
        self._options = options
        self._metrics: CacheMetrics = metrics or NoOpCacheMetrics()
        self._clock: Clock = clock or monotonic_ms
        self._name = name
        self._tokens = itertools.count(1)

    @property
    def store(self) -> EntryStore[T]:
        return self._store

    @property
    def options(self) -> CacheOptions:
        return self._options

    def _now(self) -> float:
        return self._clock()

    def _tags(self, **extra: str) -> dict[str, str]:
        return {"function": self._name, **extra}

    def _expire_at(self, ttl: float) -> float:
        if ttl == NEVER_EXPIRES:
            return NEVER_EXPIRES
        return self._now() + ttl

    def _entry_is_fresh(self, key: str, entry: CacheEntry[T] | None) -> bool:
        if entry is None or entry.key != key or not entry.settled:
            return False
        return entry.expire_at == NEVER_EXPIRES or entry.expire_at > self._now()

    # -- inspection --------------------------------------------------------

    def is_fresh(self, group: str, key: str) -> bool:
        """Settled, same key, and not expired."""
        return self._entry_is_fresh(key, self._store.get(group))

    def is_settled(self, group: str, key: str) -> bool:
        """Settled under the same key, fresh or not."""
        entry = self._store.get(group)
        return entry is not None and entry.key == key and entry.settled

    def get(self, group: str, key: str) -> T | None:
        """
        Return the cached value for a matching key, or `None`.

        With `must_revalidate`, values of stale entries are withheld.
        """
        entry = self._store.get(group)
        if entry is None or entry.key != key:
            return None
        if self._options.must_revalidate and not self._entry_is_fresh(key, entry):
            return None
        if not entry.has_value:
            return None
        return entry.value  # type: ignore[return-value]

    # -- mutation ----------------------------------------------------------

    def call(
        self,
        group: str,
        key: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> SharedResult[T]:
        """Return the shared handle of an in-flight or fresh entry, reloading otherwise."""
        entry = self._store.get(group)
        if entry is not None and entry.key == key:
            if entry.is_pending or self._entry_is_fresh(key, entry):
                self._metrics.incr("cache_hit", tags=self._tags())
                return entry.handle
            if (
                self._options.stale_while_revalidate
                and not self._options.must_revalidate
                and entry.has_value
            ):
                self._metrics.incr("cache_stale_hit", tags=self._tags())
                self.reload(group, key, args, kwargs)
                return entry.handle
        return self.reload(group, key, args, kwargs)

    def reload(
        self,
        group: str,
        key: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> SharedResult[T]:
        """Invoke the producer and install a pending entry for `group`."""
        previous = self._store.get(group)
        loop = asyncio.get_running_loop()
        promise: asyncio.Future[T] = asyncio.ensure_future(
            self._producer(*args, **kwargs), loop=loop
        )
        token = next(self._tokens)
        # Pending entries keep NEVER_EXPIRES until settled; `settled` gates freshness.
        if previous is None:
            entry: CacheEntry[T] = CacheEntry(
                key=key,
                promise=promise,
                handle=SharedResult(promise),
                settled=False,
                expire_at=NEVER_EXPIRES,
                token=token,
            )
        else:
            entry = dataclasses.replace(
                previous,
                key=key,
                promise=promise,
                handle=SharedResult(promise),
                settled=False,
                expire_at=NEVER_EXPIRES,
                token=token,
            )
        self._store.set(group, entry)
        promise.add_done_callback(functools.partial(self._settle, group, entry))
        self._metrics.incr("cache_reload", tags=self._tags())
        logger.debug("Reloading %s (group=%r, key=%r)", self._name, group, key)
        return entry.handle

    def _settle(self, group: str, entry: CacheEntry[T], promise: asyncio.Future[T]) -> None:
        if promise.cancelled():
            error: BaseException | None = asyncio.CancelledError()
        else:
            # Marks the exception retrieved; awaiting callers still see it raised.
            error = promise.exception()

        current = self._store.get(group)
        if current is None or current.token != entry.token:
            return

        if error is not None:
            settled = dataclasses.replace(entry, settled=True, expire_at=EXPIRED, value=MISSING)
            self._metrics.incr("cache_settled", tags=self._tags(outcome="failure"))
            logger.debug(
                "Load failed for %s (group=%r): %r", self._name, group, error
            )
        else:
            settled = dataclasses.replace(
                entry,
                settled=True,
                expire_at=self._expire_at(self._options.ttl),
                value=promise.result(),
            )
            self._metrics.incr("cache_settled", tags=self._tags(outcome="success"))
        self._store.set(group, settled)

    def set(
        self,
        group: str,
        key: str,
        value: Any = MISSING,
        *,
        ttl: float | None = None,
    ) -> SharedResult[T]:
        """
        Install a settled entry without calling the producer.

        Without a value the entry carries a rejected future and is already
        expired.
        """
        effective_ttl = self._options.ttl if ttl is None else ttl
        if not math.isfinite(effective_ttl) or (
            effective_ttl < 0 and effective_ttl != NEVER_EXPIRES
        ):
            raise CacheOptionsError("ttl must be >= 0, or -1 for never expires")

        promise: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        if value is MISSING:
            promise.set_exception(
                MissingValueError(f"No value set for {self._name} (group={group!r})")
            )
            promise.exception()
            expire_at = EXPIRED
        else:
            promise.set_result(value)
            expire_at = self._expire_at(effective_ttl)

        previous = self._store.get(group)
        handle = SharedResult(promise)
        self._store.set(
            group,
            CacheEntry(
                key=key,
                promise=promise,
                handle=handle,
                settled=True,
                expire_at=expire_at,
                token=next(self._tokens),
                value=value,
                metadata=dict(previous.metadata) if previous is not None else {},
            ),
        )
        self._metrics.incr("cache_set", tags=self._tags())
        return handle

    def delete(self, group: str) -> None:
        self._store.set(group, None)

    def clear(self) -> None:
        self._store.clear()
