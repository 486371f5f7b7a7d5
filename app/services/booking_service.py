from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, List

from app.models import BookingStatus, SevaBooking
from app.services import booking_rules
from app.services.booking_store import BookingStore
from app.services.errors import Conflict, NotFound, RuleViolation, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("sevakartha_name", "department", "seva_type", "pooja_date")
TEXT_FIELDS = ("sevakartha_name", "department", "seva_type")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class BookingService:
    """Admission flow and CRUD for seva bookings. Holds no state between calls."""

    def __init__(self, store: BookingStore):
        self.store = store

    def create_booking(
        self,
        sevakartha_name: Any,
        department: Any,
        seva_type: Any,
        pooja_date: Any,
        now: datetime | None = None,
    ) -> SevaBooking:
        values = {
            "sevakartha_name": sevakartha_name,
            "department": department,
            "seva_type": seva_type,
            "pooja_date": pooja_date,
        }
        missing = [name for name in REQUIRED_FIELDS if _is_blank(values[name])]
        # pooja_date of the wrong type is left to normalize() and reported as InvalidDate
        invalid = [name for name in TEXT_FIELDS if name not in missing and not isinstance(values[name], str)]
        if missing or invalid:
            raise ValidationError(missing, invalid)

        target = booking_rules.normalize(pooja_date)

        if not booking_rules.is_admissible(target, now):
            allowed = booking_rules.required_booking_date(target)
            logger.info("Rejected booking for %s; only bookable on %s", target, allowed)
            raise RuleViolation(target, allowed)

        existing = self.store.find_by_pooja_date(target)
        if existing is not None:
            logger.info("Pooja date %s already booked by booking %s", target, existing.id)
            raise Conflict(target, existing.sevakartha_name)

        day, month, year = decompose(target)
        booking = SevaBooking(
            sevakartha_name=sevakartha_name.strip(),
            department=department.strip(),
            seva_type=seva_type.strip(),
            pooja_date=target,
            day=day,
            month=month,
            year=year,
            status=BookingStatus.CONFIRMED.value,
        )
        created = self.store.insert(booking)
        logger.info("Created booking %s for %s (%s)", created.id, created.pooja_date, created.seva_type)
        return created

    def list_bookings(self) -> List[SevaBooking]:
        bookings = self.store.list_all()
        logger.info("Found %d bookings", len(bookings))
        return bookings

    def get_booking(self, booking_id: int) -> SevaBooking:
        booking = self.store.get(booking_id)
        if booking is None:
            raise NotFound(booking_id)
        return booking

    def delete_booking(self, booking_id: int) -> None:
        deleted = self.store.delete(booking_id)
        if deleted == 0:
            raise NotFound(booking_id)
        logger.info("Deleted booking %s", booking_id)

    def count_bookings(self) -> int:
        return self.store.count()


def decompose(pooja_date: date) -> tuple[int, int, int]:
    """(day, month, year) of a calendar date, as stored alongside it."""
    return pooja_date.day, pooja_date.month, pooja_date.year


__all__ = ["BookingService", "REQUIRED_FIELDS", "TEXT_FIELDS", "decompose"]
