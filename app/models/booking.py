from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, Integer, String, UniqueConstraint

from database import Base
from app.models.base import utcnow
from app.models.enums import BookingStatus


class SevaBooking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # One seva per pooja date; the insert is the authoritative conflict check.
        UniqueConstraint("pooja_date", name="uq_bookings_pooja_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    sevakartha_name = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False)
    seva_type = Column(String(255), nullable=False)
    pooja_date = Column(Date, nullable=False)
    day = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    status = Column(String(20), nullable=True, default=BookingStatus.CONFIRMED.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)


__all__ = ["SevaBooking"]
