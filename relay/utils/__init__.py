"""Utility functions for idempotency keys and time handling."""

from .idempotency import build_idempotency_key
from .timestamps import ensure_utc, format_for_storage, parse_from_storage, utc_now

__all__ = [
    "build_idempotency_key",
    "utc_now",
    "ensure_utc",
    "format_for_storage",
    "parse_from_storage",
]
