"""Shared test setup: local SQLite settings plus in-memory store and sender fakes."""
from __future__ import annotations

import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("APP_ENV", "local")

from app.models import SevaBooking  # noqa: E402
from app.services.errors import Conflict, StoreError  # noqa: E402


class InMemoryBookingStore:
    def __init__(self, hide_existing: bool = False, fail: bool = False):
        self.rows: Dict[int, SevaBooking] = {}
        self.inserts = 0
        self._next_id = 1
        # Simulates a concurrent writer: the pre-check sees nothing, the insert still conflicts.
        self.hide_existing = hide_existing
        self.fail = fail

    def _check(self) -> None:
        if self.fail:
            raise StoreError()

    def add(self, **fields) -> SevaBooking:
        pooja_date: date = fields["pooja_date"]
        fields.setdefault("sevakartha_name", "Existing")
        fields.setdefault("department", "ISE")
        fields.setdefault("seva_type", "Archana")
        fields.setdefault("status", "confirmed")
        booking = SevaBooking(
            day=pooja_date.day,
            month=pooja_date.month,
            year=pooja_date.year,
            **fields,
        )
        booking.id = self._next_id
        booking.created_at = datetime(2025, 1, 1)
        self._next_id += 1
        self.rows[booking.id] = booking
        return booking

    def find_by_pooja_date(self, pooja_date: date) -> Optional[SevaBooking]:
        self._check()
        if self.hide_existing:
            return None
        return next((b for b in self.rows.values() if b.pooja_date == pooja_date), None)

    def insert(self, booking: SevaBooking) -> SevaBooking:
        self._check()
        existing = next((b for b in self.rows.values() if b.pooja_date == booking.pooja_date), None)
        if existing is not None:
            raise Conflict(booking.pooja_date, existing.sevakartha_name)
        booking.id = self._next_id
        booking.created_at = datetime(2025, 1, 1)
        self._next_id += 1
        self.rows[booking.id] = booking
        self.inserts += 1
        return booking

    def get(self, booking_id: int) -> Optional[SevaBooking]:
        self._check()
        return self.rows.get(booking_id)

    def delete(self, booking_id: int) -> int:
        self._check()
        return 1 if self.rows.pop(booking_id, None) is not None else 0

    def list_all(self) -> List[SevaBooking]:
        self._check()
        return sorted(self.rows.values(), key=lambda b: (b.pooja_date, b.id))

    def list_for_date(self, pooja_date: date, statuses: Iterable[str]) -> List[SevaBooking]:
        self._check()
        wanted = set(statuses)
        return [b for b in self.list_all() if b.pooja_date == pooja_date and b.status in wanted]

    def count(self) -> int:
        self._check()
        return len(self.rows)


class RecordingSender:
    def __init__(self, fail_for: Iterable[int] = (), raise_for: Iterable[int] = ()):
        self.sent: List[int] = []
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)

    def send(self, booking) -> dict:
        self.sent.append(booking.id)
        if booking.id in self.raise_for:
            raise ConnectionError("smtp timed out")
        if booking.id in self.fail_for:
            return {"success": False, "error": "Authentication failed"}
        return {"success": True}


@pytest.fixture
def memory_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()
