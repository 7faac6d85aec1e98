from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_booking.models.booking import Booking


async def find_booking_by_user_id(db: AsyncSession, user_id: int) -> Optional[Booking]:
    """First booking of the user, with its room."""
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user_id)
        .options(selectinload(Booking.room))
        .order_by(Booking.id)
        .limit(1)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def find_booking(db: AsyncSession, booking_id: int, user_id: int) -> Optional[Booking]:
    """Booking with this id owned by this user, with its room."""
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id, Booking.user_id == user_id)
        .options(selectinload(Booking.room))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    booking = Booking(user_id=user_id, room_id=room_id)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    return booking


async def update_booking(db: AsyncSession, booking_id: int, room_id: int) -> Optional[Booking]:
    """Point the booking at another room. Returns None if no such booking."""
    booking = await db.get(Booking, booking_id)
    if booking is None:
        return None

    booking.room_id = room_id
    await db.flush()
    await db.refresh(booking)
    return booking
