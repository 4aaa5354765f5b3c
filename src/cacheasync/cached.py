"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Callable cache wrapper and its argument-bound context view.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .engine import CacheLifecycle
from .keys import resolve_key
from .metrics import CacheMetrics
from .options import CacheOptions
from .stores.base import EntryStore
from .types import MISSING, Clock, KeyTuple, Producer, SharedResult

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheContext(Generic[T]):
    """
    One logical cache entry with its arguments and key tuple captured.

    Operations on a context never re-run the resolver.
    """

    lifecycle: CacheLifecycle[T]
    group: str
    key: str
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __call__(self) -> SharedResult[T]:
        return self.lifecycle.call(self.group, self.key, self.args, self.kwargs)

    def get(self) -> T | None:
        return self.lifecycle.get(self.group, self.key)

    def reload(self) -> SharedResult[T]:
        return self.lifecycle.reload(self.group, self.key, self.args, self.kwargs)

    def set(self, value: Any = MISSING, *, ttl: float | None = None) -> SharedResult[T]:
        return self.lifecycle.set(self.group, self.key, value, ttl=ttl)

    def delete(self) -> None:
        self.lifecycle.delete(self.group)

    def is_fresh(self) -> bool:
        return self.lifecycle.is_fresh(self.group, self.key)

    def is_settled(self) -> bool:
        return self.lifecycle.is_settled(self.group, self.key)


class CachedFunction(Generic[T]):
    """
    Async producer wrapped with a per-group entry cache.

    Calling the wrapper returns a shared handle while the group's entry is
    in flight or fresh, and triggers a reload otherwise. Auxiliary methods
    take the same arguments as the producer and resolve them to the same
    `(group, key)` tuple.
    """

    def __init__(
        self,
        producer: Producer,
        store: EntryStore[T],
        *,
        options: CacheOptions,
        metrics: CacheMetrics | None = None,
        clock: Clock | None = None,
        name: str | None = None,
    ) -> None:
        self._name = name or getattr(producer, "__qualname__", None) or repr(producer)
        self._options = options
        self._lifecycle: CacheLifecycle[T] = CacheLifecycle(
            producer,
            store,
            options=options,
            metrics=metrics,
            clock=clock,
            name=self._name,
        )
        functools.update_wrapper(self, producer)

    def __repr__(self) -> str:
        return f"<CachedFunction {self._name} store={self.store.backend_id}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def store(self) -> EntryStore[T]:
        """Underlying entry store, exposed for inspection."""
        return self._lifecycle.store

    def resolve(self, *args: Any, **kwargs: Any) -> KeyTuple:
        """Resolve call arguments to this function's `(group, key)` tuple."""
        return resolve_key(self._options.resolver, args, kwargs)

    def __call__(self, *args: Any, **kwargs: Any) -> SharedResult[T]:
        group, key = self.resolve(*args, **kwargs)
        return self._lifecycle.call(group, key, args, kwargs)

    def get(self, *args: Any, **kwargs: Any) -> T | None:
        """Return the currently cached value immediately."""
        group, key = self.resolve(*args, **kwargs)
        return self._lifecycle.get(group, key)

    def reload(self, *args: Any, **kwargs: Any) -> SharedResult[T]:
        """Send a new request without deleting the old value first."""
        group, key = self.resolve(*args, **kwargs)
        return self._lifecycle.reload(group, key, args, kwargs)

    def set(
        self,
        value: Any,
        /,
        *args: Any,
        ttl: float | None = None,
        **kwargs: Any,
    ) -> SharedResult[T]:
        """Seed the entry for these arguments with `value`; `ttl` defaults to the option."""
        group, key = self.resolve(*args, **kwargs)
        return self._lifecycle.set(group, key, value, ttl=ttl)

    def delete(self, *args: Any, **kwargs: Any) -> None:
        """Delete the currently cached value."""
        group, _ = self.resolve(*args, **kwargs)
        self._lifecycle.delete(group)

    def is_fresh(self, *args: Any, **kwargs: Any) -> bool:
        group, key = self.resolve(*args, **kwargs)
        return self._lifecycle.is_fresh(group, key)

    def is_settled(self, *args: Any, **kwargs: Any) -> bool:
        group, key = self.resolve(*args, **kwargs)
        return self._lifecycle.is_settled(group, key)

    def clear(self) -> None:
        """Clear every entry of this function."""
        self._lifecycle.clear()

    def get_context(self, *args: Any, **kwargs: Any) -> CacheContext[T]:
        """Bind arguments once so repeated operations skip key resolution."""
        group, key = self.resolve(*args, **kwargs)
        return CacheContext(
            lifecycle=self._lifecycle,
            group=group,
            key=key,
            args=args,
            kwargs=dict(kwargs),
        )
