from __future__ import annotations

from enum import Enum


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    # Legacy value written by early versions of the booking form.
    BOOKED = "booked"


__all__ = ["BookingStatus"]
