from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Protocol

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import SevaBooking
from app.services.errors import Conflict, StoreError

logger = logging.getLogger(__name__)


class BookingStore(Protocol):
    """Persistence capability handed to the booking service and the reminder dispatcher."""

    def find_by_pooja_date(self, pooja_date: date) -> Optional[SevaBooking]: ...

    def insert(self, booking: SevaBooking) -> SevaBooking: ...

    def get(self, booking_id: int) -> Optional[SevaBooking]: ...

    def delete(self, booking_id: int) -> int: ...

    def list_all(self) -> List[SevaBooking]: ...

    def list_for_date(self, pooja_date: date, statuses: Iterable[str]) -> List[SevaBooking]: ...

    def count(self) -> int: ...


class SqlBookingStore:
    """SQLAlchemy-backed store; every call is one round-trip on the given session."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_pooja_date(self, pooja_date: date) -> Optional[SevaBooking]:
        try:
            return self.db.execute(
                select(SevaBooking).where(SevaBooking.pooja_date == pooja_date)
            ).scalars().first()
        except SQLAlchemyError as exc:
            raise self._store_error("lookup by pooja_date", exc) from exc

    def insert(self, booking: SevaBooking) -> SevaBooking:
        self.db.add(booking)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent insert for the same date.
            self.db.rollback()
            logger.info("Unique pooja_date violated on insert for %s", booking.pooja_date)
            existing = self.find_by_pooja_date(booking.pooja_date)
            raise Conflict(booking.pooja_date, existing.sevakartha_name if existing else None) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._store_error("insert", exc) from exc
        self.db.refresh(booking)
        return booking

    def get(self, booking_id: int) -> Optional[SevaBooking]:
        try:
            return self.db.get(SevaBooking, booking_id)
        except SQLAlchemyError as exc:
            raise self._store_error("get", exc) from exc

    def delete(self, booking_id: int) -> int:
        """Hard delete; returns the affected row count."""
        try:
            result = self.db.execute(
                SevaBooking.__table__.delete().where(SevaBooking.id == booking_id)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._store_error("delete", exc) from exc
        return result.rowcount or 0

    def list_all(self) -> List[SevaBooking]:
        try:
            return list(
                self.db.execute(
                    select(SevaBooking).order_by(SevaBooking.pooja_date.asc(), SevaBooking.id.asc())
                ).scalars()
            )
        except SQLAlchemyError as exc:
            raise self._store_error("list", exc) from exc

    def list_for_date(self, pooja_date: date, statuses: Iterable[str]) -> List[SevaBooking]:
        try:
            return list(
                self.db.execute(
                    select(SevaBooking)
                    .where(SevaBooking.pooja_date == pooja_date, SevaBooking.status.in_(list(statuses)))
                    .order_by(SevaBooking.id.asc())
                ).scalars()
            )
        except SQLAlchemyError as exc:
            raise self._store_error("list for date", exc) from exc

    def count(self) -> int:
        try:
            self.db.execute(text("SELECT 1"))
            return self.db.execute(select(func.count(SevaBooking.id))).scalar_one()
        except SQLAlchemyError as exc:
            raise self._store_error("count", exc) from exc

    @staticmethod
    def _store_error(operation: str, exc: SQLAlchemyError) -> StoreError:
        logger.error("Booking store %s failed: %s", operation, exc.__class__.__name__, exc_info=exc)
        return StoreError()


__all__ = ["BookingStore", "SqlBookingStore"]
