"""
Booking endpoints: view, create, and move the user's hotel room booking.
"""

import time

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.db.session import get_db
from hotel_booking.schemas.booking import BookingRoomBody, BookingResponse, BookingIdResponse
from hotel_booking.services import booking_service
from hotel_booking.core.errors import DomainError
from hotel_booking.core.security import get_current_user_id
from hotel_booking.core.metrics import booking_latency, record_booking_operation

router = APIRouter(prefix="/booking", tags=["Bookings"])


async def _instrumented(operation: str, call):
    start_time = time.perf_counter()
    try:
        result = await call
    except DomainError as e:
        record_booking_operation(operation, e.kind.value.lower())
        raise
    finally:
        booking_latency.labels(operation=operation).observe(time.perf_counter() - start_time)
    record_booking_operation(operation, "success")
    return result


@router.get("", response_model=BookingResponse)
async def get_booking(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get the authenticated user's booking with its room."""
    return await _instrumented("get", booking_service.get_booking(db, user_id))


@router.post("", response_model=BookingIdResponse)
async def create_booking(
    body: BookingRoomBody,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a room.

    Requires an enrollment and a paid, in-person ticket whose type includes
    accommodation (404 / 403 otherwise), and a room with a free place
    (404 if the room does not exist, 403 if it is full).
    """
    booking = await _instrumented(
        "create", booking_service.create_booking(db, user_id, body.room_id)
    )
    return BookingIdResponse(booking_id=booking.id)


@router.put("/{booking_id}", response_model=BookingIdResponse)
async def update_booking(
    booking_id: int,
    body: BookingRoomBody,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Move a booking to another room. The user must already have a booking."""
    booking = await _instrumented(
        "update", booking_service.update_booking(db, user_id, body.room_id, booking_id)
    )
    return BookingIdResponse(booking_id=booking.id)
