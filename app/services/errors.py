from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable


class BookingError(Exception):
    """Base class for outcomes the API reports as structured failures."""

    kind = "booking_error"
    status_code = 400
    retryable = False

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.kind, "message": self.message}
        payload.update(self.extra)
        return payload


class ValidationError(BookingError):
    kind = "validation_error"

    def __init__(self, missing_fields: Iterable[str], invalid_fields: Iterable[str] = ()):
        missing = list(missing_fields)
        invalid = list(invalid_fields)
        problems = []
        if missing:
            problems.append(f"All fields are required: {', '.join(missing)}")
        if invalid:
            problems.append(f"Must be text: {', '.join(invalid)}")
        super().__init__(
            "; ".join(problems) or "Invalid booking request",
            missing_fields=missing,
            invalid_fields=invalid,
        )


class InvalidDate(BookingError):
    kind = "invalid_date"

    def __init__(self, raw: Any):
        super().__init__(f"Invalid pooja_date {raw!r}; expected YYYY-MM-DD")


class RuleViolation(BookingError):
    kind = "rule_violation"

    def __init__(self, pooja_date: date, allowed_booking_date: date):
        super().__init__(
            f"Booking for {pooja_date.isoformat()} can only be made on "
            f"{allowed_booking_date.isoformat()} (exactly 3 days before the pooja)",
            pooja_date=pooja_date.isoformat(),
            allowed_booking_date=allowed_booking_date.isoformat(),
        )
        self.allowed_booking_date = allowed_booking_date


class Conflict(BookingError):
    kind = "conflict"
    status_code = 409

    def __init__(self, pooja_date: date, booked_by: str | None):
        who = booked_by or "another sevakartha"
        super().__init__(
            f"{pooja_date.isoformat()} is already booked by {who}",
            pooja_date=pooja_date.isoformat(),
            booked_by=booked_by,
        )
        self.booked_by = booked_by


class NotFound(BookingError):
    kind = "not_found"
    status_code = 404

    def __init__(self, booking_id: int | str):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class StoreError(BookingError):
    """Connectivity or query failure; the driver text stays in the logs."""

    kind = "store_error"
    status_code = 500
    retryable = True

    def __init__(self, message: str = "Booking store is unavailable, please retry later"):
        super().__init__(message)


class DispatchError(Exception):
    """A single reminder could not be delivered."""

    def __init__(self, booking_id: int | None, reason: str):
        super().__init__(f"Reminder for booking {booking_id} failed: {reason}")
        self.booking_id = booking_id
        self.reason = reason


__all__ = [
    "BookingError",
    "ValidationError",
    "InvalidDate",
    "RuleViolation",
    "Conflict",
    "NotFound",
    "StoreError",
    "DispatchError",
]
