"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Resolution of call arguments into `(group, key)` cache tuples.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .types import KeyTuple, PrimitiveKey, Resolver, ResolverResult


def default_resolver(*args: Any, **kwargs: Any) -> ResolverResult:
    """Ignore all arguments so the wrapped function loads once globally."""
    _ = args
    _ = kwargs
    return ""


def _stringify(part: PrimitiveKey) -> str:
    if part is None:
        return ""
    return str(part)


def normalize_key(result: ResolverResult) -> KeyTuple:
    """
    Coerce raw resolver output into a well-formed `KeyTuple`.

    A scalar is used as both group and key. Sequences contribute their first
    two items; missing items become empty strings.
    """
    if isinstance(result, (list, tuple)):
        parts = list(result[:2])
        while len(parts) < 2:
            parts.append(None)
        group, key = parts
    else:
        group = key = result
    return KeyTuple(_stringify(group), _stringify(key))


def resolve_key(
    resolver: Resolver,
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any] | None = None,
) -> KeyTuple:
    """Run `resolver` on call arguments and normalize its output."""
    return normalize_key(resolver(*args, **dict(kwargs or {})))
