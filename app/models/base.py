from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp; the bookings table stores UTC without offsets."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


__all__ = ["utcnow"]
