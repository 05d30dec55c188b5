"""Persistence errors."""

from __future__ import annotations


class StorageError(Exception):
    """Raised when the underlying storage medium fails.

    Covers open, write, query and constraint failures alike. The original
    driver exception is chained as ``__cause__``.
    """


__all__ = ["StorageError"]
