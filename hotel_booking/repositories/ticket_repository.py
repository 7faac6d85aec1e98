from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_booking.models.ticket import Ticket


async def find_ticket_by_enrollment_id(db: AsyncSession, enrollment_id: int) -> Optional[Ticket]:
    """First ticket of the enrollment, with its ticket type."""
    result = await db.execute(
        select(Ticket)
        .where(Ticket.enrollment_id == enrollment_id)
        .options(selectinload(Ticket.ticket_type))
        .order_by(Ticket.id)
        .limit(1)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()
