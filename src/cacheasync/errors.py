"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Exception types raised by the cache wrapper, its options, and store backends.
"""

from __future__ import annotations


class CacheError(RuntimeError):
    """Base error for cache wrapper failures."""


class CacheOptionsError(CacheError, ValueError):
    """Raised when cache options fail validation."""


class EntryStoreError(CacheError):
    """Raised when entry store backend registration/resolution fails."""


class MissingValueError(CacheError, LookupError):
    """Raised by the future of an entry that was set without a value."""
