from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BookingCreateRequest(BaseModel):
    # Any type is accepted here; presence, type and date shape are checked
    # by the booking service so they come back as 400, not 422.
    sevakartha_name: Optional[Any] = None
    department: Optional[Any] = None
    seva_type: Optional[Any] = None
    pooja_date: Optional[Any] = Field(None, description="YYYY-MM-DD")


class BookingResponse(BaseModel):
    id: int
    sevakartha_name: str
    department: str
    seva_type: str
    pooja_date: date
    day: int
    month: int
    year: int
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookingListResponse(BaseModel):
    success: bool = True
    count: int
    bookings: List[BookingResponse]
    timestamp: datetime


class BookingCreateResponse(BaseModel):
    success: bool = True
    message: str
    booking_id: int
    booking: BookingResponse


class BookingDeleteResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    success: bool
    database: str
    total_bookings: Optional[int] = None
    error: Optional[str] = None
