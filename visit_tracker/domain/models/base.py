"""Shared column helpers for domain models."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timestamp assigned at flush time, with sub-second precision on every backend."""
    return datetime.now(timezone.utc)
