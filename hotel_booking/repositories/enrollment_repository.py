from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_booking.models.enrollment import Enrollment


async def find_with_address_by_user_id(db: AsyncSession, user_id: int) -> Optional[Enrollment]:
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.user_id == user_id)
        .options(selectinload(Enrollment.address))
    )
    return result.scalar_one_or_none()
