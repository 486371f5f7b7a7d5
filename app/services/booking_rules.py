from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

from app.services.errors import InvalidDate

# Bookings open on exactly one day: this many days before the pooja.
ADVANCE_DAYS = 3

_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize(value: Any) -> date:
    """
    Parse a ``YYYY-MM-DD`` pooja date as a plain calendar date.

    No time-of-day or zone is ever attached, so the result cannot drift by a
    day depending on the server's local clock.
    """
    if isinstance(value, datetime):
        raise InvalidDate(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(value)
    text = value.strip()
    if not _DATE_SHAPE.match(text):
        raise InvalidDate(value)
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDate(value) from exc


def get_utc_today(now: datetime | None = None) -> date:
    """Return the UTC calendar date of ``now`` (default: current instant). Separated for monkeypatching in tests."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        # naive datetimes are taken to be UTC already
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).date()


def required_booking_date(pooja_date: date) -> date:
    """The only calendar day on which ``pooja_date`` may be booked."""
    return pooja_date - timedelta(days=ADVANCE_DAYS)


def is_admissible(pooja_date: date, now: datetime | None = None) -> bool:
    """True iff today (UTC) is exactly the required booking date; not a window."""
    return get_utc_today(now) == required_booking_date(pooja_date)


__all__ = [
    "ADVANCE_DAYS",
    "normalize",
    "get_utc_today",
    "required_booking_date",
    "is_admissible",
]
