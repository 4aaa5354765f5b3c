"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Validated per-function cache options.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import CacheOptionsError
from .keys import default_resolver
from .types import NEVER_EXPIRES


class CacheOptions(BaseModel):
    """
    Options controlling how one wrapped function caches its results.

    Attributes:
        resolver: Maps call arguments to `group` or `(group, key)`.
        must_revalidate: Withhold stale values from `get`.
        ttl: Time to live in milliseconds after settlement, `-1` for never.
        stale_while_revalidate: Let calls return a stale successful result
            while a background reload runs.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    resolver: Callable[..., Any] = Field(default=default_resolver)
    must_revalidate: bool = False
    ttl: float = Field(default=NEVER_EXPIRES, allow_inf_nan=False)
    stale_while_revalidate: bool = False

    @field_validator("ttl")
    @classmethod
    def _validate_ttl(cls, value: float) -> float:
        if value < 0 and value != NEVER_EXPIRES:
            raise ValueError("ttl must be >= 0, or -1 for never expires")
        return value

    @property
    def never_expires(self) -> bool:
        return self.ttl == NEVER_EXPIRES

    def merged(self, **overrides: Any) -> CacheOptions:
        """Return a re-validated copy with non-`None` overrides applied."""
        updates = {name: value for name, value in overrides.items() if value is not None}
        if not updates:
            return self
        return build_options({**dict(self), **updates})


def build_options(raw: dict[str, Any] | None = None) -> CacheOptions:
    """Build options from a plain mapping, raising `CacheOptionsError` on bad input."""
    try:
        return CacheOptions(**(raw or {}))
    except ValidationError as exc:
        raise CacheOptionsError(f"Invalid cache options: {exc}") from exc
