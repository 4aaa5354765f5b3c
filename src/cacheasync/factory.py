"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory for cached functions, its per-factory registry, and env configuration.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from threading import Lock
from typing import Any

from .cached import CachedFunction
from .errors import CacheOptionsError
from .metrics import CacheMetrics
from .options import CacheOptions, build_options
from .stores.base import StoreFactory
from .stores.registry import DEFAULT_BACKEND, resolve_store_factory
from .types import Clock, Producer, Resolver

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


class CachedFunctionRegistry:
    """Ordered record of every cached function created by one factory."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._functions: list[CachedFunction[Any]] = []

    def add(self, fn: CachedFunction[Any]) -> None:
        with self._lock:
            self._functions.append(fn)

    def all(self) -> list[CachedFunction[Any]]:
        with self._lock:
            return list(self._functions)

    def clear_all(self) -> None:
        for fn in self.all():
            fn.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._functions)


class CacheFactory:
    """
    Creates cached functions that share a store factory and default options.

    Each wrapped function gets its own store instance from `store_factory`.
    """

    def __init__(
        self,
        store_factory: str | StoreFactory | None = None,
        *,
        defaults: CacheOptions | None = None,
        metrics: CacheMetrics | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store_factory = resolve_store_factory(store_factory)
        self._defaults = defaults if defaults is not None else CacheOptions()
        self._metrics = metrics
        self._clock = clock
        self._registry = CachedFunctionRegistry()

    @property
    def defaults(self) -> CacheOptions:
        return self._defaults

    def cache_async(
        self,
        fn: Producer,
        options: CacheOptions | None = None,
        *,
        resolver: Resolver | None = None,
        must_revalidate: bool | None = None,
        ttl: float | None = None,
        stale_while_revalidate: bool | None = None,
        name: str | None = None,
    ) -> CachedFunction[Any]:
        """
        Wrap `fn` with a cache.

        Args:
            fn: Producer returning an awaitable.
            options: Base options; the factory defaults are used when omitted.
            resolver: Maps call arguments to `group` or `(group, key)`.
            must_revalidate: Withhold stale values from `get`.
            ttl: Milliseconds a settled value stays fresh, `-1` for never.
            stale_while_revalidate: Serve stale values from calls while
                reloading in the background.
            name: Label used in logs and metrics.
        """
        base = options if options is not None else self._defaults
        resolved = base.merged(
            resolver=resolver,
            must_revalidate=must_revalidate,
            ttl=ttl,
            stale_while_revalidate=stale_while_revalidate,
        )
        cached = CachedFunction(
            fn,
            self._store_factory(),
            options=resolved,
            metrics=self._metrics,
            clock=self._clock,
            name=name,
        )
        self._registry.add(cached)
        return cached

    def cached(
        self,
        options: CacheOptions | None = None,
        **kwargs: Any,
    ) -> Callable[[Producer], CachedFunction[Any]]:
        """Decorator form of `cache_async`."""

        def decorator(fn: Producer) -> CachedFunction[Any]:
            return self.cache_async(fn, options, **kwargs)

        return decorator

    def get_all(self) -> list[CachedFunction[Any]]:
        """Every cached function created by this factory so far."""
        return self._registry.all()

    def clear_cache(self) -> None:
        """Clear the entries of every cached function of this factory."""
        self._registry.clear_all()


def cache_async_factory(
    store_factory: str | StoreFactory | None = None,
    **kwargs: Any,
) -> CacheFactory:
    """Create a new factory with its own empty registry."""
    return CacheFactory(store_factory, **kwargs)


def _env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


def _env_flag(name: str, *, default: bool = False) -> bool:
    raw = _env_first(name)
    if raw is None:
        return default
    value = raw.lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise CacheOptionsError(f"Invalid boolean for {name}: {raw}")


def create_cache_factory_from_env(
    *,
    metrics: CacheMetrics | None = None,
    clock: Clock | None = None,
) -> CacheFactory:
    """
    Create a cache factory from `CACHEASYNC_*` environment variables.

    Variables:
    - `CACHEASYNC_STORE_BACKEND`: registered store id (default `inmemory`).
    - `CACHEASYNC_TTL_MS`: default ttl in milliseconds (default `-1`).
    - `CACHEASYNC_MUST_REVALIDATE`: withhold stale values from `get`.
    - `CACHEASYNC_STALE_WHILE_REVALIDATE`: serve stale values while reloading.
    """
    backend = _env_first("CACHEASYNC_STORE_BACKEND", default=DEFAULT_BACKEND) or DEFAULT_BACKEND
    raw_ttl = _env_first("CACHEASYNC_TTL_MS", default="-1") or "-1"
    try:
        ttl = float(raw_ttl)
    except ValueError as exc:
        raise CacheOptionsError(f"Invalid CACHEASYNC_TTL_MS: {raw_ttl}") from exc

    defaults = build_options(
        {
            "ttl": ttl,
            "must_revalidate": _env_flag("CACHEASYNC_MUST_REVALIDATE"),
            "stale_while_revalidate": _env_flag("CACHEASYNC_STALE_WHILE_REVALIDATE"),
        }
    )
    return CacheFactory(backend, defaults=defaults, metrics=metrics, clock=clock)
