from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_booking.models.hotel import Room


async def find_room_by_id(
    db: AsyncSession,
    room_id: int,
    for_update: bool = False,
) -> Optional[Room]:
    """
    Room with its current bookings.

    populate_existing forces the bookings collection to be reloaded even if
    the room is already in the session, so occupancy is never stale.
    """
    query = (
        select(Room)
        .where(Room.id == room_id)
        .options(selectinload(Room.bookings))
        .execution_options(populate_existing=True)
    )
    if for_update:
        query = query.with_for_update()

    result = await db.execute(query)
    return result.scalar_one_or_none()
