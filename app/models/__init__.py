from database import Base
from app.models.base import utcnow
from app.models.enums import BookingStatus
from app.models.booking import SevaBooking

__all__ = [
    "Base",
    "utcnow",
    "BookingStatus",
    "SevaBooking",
]
