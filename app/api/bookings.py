from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.models import BookingStatus, SevaBooking
from app.schemas.booking import (
    BookingCreateRequest,
    BookingCreateResponse,
    BookingDeleteResponse,
    BookingListResponse,
    BookingResponse,
    HealthResponse,
)
from app.services.booking_service import BookingService
from app.services.booking_store import SqlBookingStore
from app.services.errors import NotFound, StoreError
from database import get_db

router = APIRouter()

# signed 64-bit, the widest integer id any supported backend stores
MAX_BOOKING_ID = 2**63 - 1


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(SqlBookingStore(db))


def _to_response(booking: SevaBooking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        sevakartha_name=booking.sevakartha_name,
        department=booking.department,
        seva_type=booking.seva_type,
        pooja_date=booking.pooja_date,
        day=booking.day,
        month=booking.month,
        year=booking.year,
        status=booking.status or BookingStatus.BOOKED.value,
        created_at=booking.created_at,
    )


@router.get("/", response_model=BookingListResponse)
def list_bookings(service: BookingService = Depends(get_booking_service)) -> BookingListResponse:
    bookings = service.list_bookings()
    items = [_to_response(booking) for booking in bookings]
    return BookingListResponse(
        count=len(items),
        bookings=items,
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/add", response_model=BookingCreateResponse)
def add_booking(
    body: Any = Body(None),
    service: BookingService = Depends(get_booking_service),
) -> BookingCreateResponse:
    # A missing or non-object body is treated as an empty form.
    payload = BookingCreateRequest.model_validate(body if isinstance(body, dict) else {})
    booking = service.create_booking(
        sevakartha_name=payload.sevakartha_name,
        department=payload.department,
        seva_type=payload.seva_type,
        pooja_date=payload.pooja_date,
    )
    return BookingCreateResponse(
        message="Seva booked successfully",
        booking_id=booking.id,
        booking=_to_response(booking),
    )


@router.get("/health", response_model=HealthResponse)
def bookings_health(service: BookingService = Depends(get_booking_service)):
    try:
        total = service.count_bookings()
    except StoreError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content=HealthResponse(success=False, database="disconnected", error=exc.kind).model_dump(),
        )
    return HealthResponse(success=True, database="connected", total_bookings=total)


def _parse_booking_id(raw: str) -> int:
    """Path ids that are not integers in the id column range can never match a row."""
    value = raw.strip()
    if not (value.isascii() and value.isdigit()) or int(value) > MAX_BOOKING_ID:
        raise NotFound(raw)
    return int(value)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: str, service: BookingService = Depends(get_booking_service)) -> BookingResponse:
    return _to_response(service.get_booking(_parse_booking_id(booking_id)))


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
def delete_booking(booking_id: str, service: BookingService = Depends(get_booking_service)) -> BookingDeleteResponse:
    parsed_id = _parse_booking_id(booking_id)
    service.delete_booking(parsed_id)
    return BookingDeleteResponse(message=f"Booking {parsed_id} deleted")
