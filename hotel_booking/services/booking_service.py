"""
Booking service: hotel room reservations for ticket holders.

ELIGIBILITY
===========

A user may book a room only if:
  1. they are enrolled in the event             (else NotFoundError)
  2. they hold a ticket for that enrollment,
     it is PAID, it is for in-person attendance,
     and its type includes hotel accommodation   (else ForbiddenError)
  3. the room exists                             (else NotFoundError)
  4. the room still has a free place             (else ForbiddenError)

Checks run in that order, so a ticket problem is reported before any room
problem. Moving an existing booking to another room only repeats 3 and 4.

CAPACITY
========

Occupancy is the number of bookings referencing the room, compared with
strict equality against capacity. The check and the insert are separate
statements: two requests racing for the last place can both pass the check.
Setting BOOKING_LOCK_ROOM_ROWS reads the room with SELECT ... FOR UPDATE,
which serializes those requests until the transaction commits.

UPDATE SEMANTICS
================

update_booking only requires that the user has *a* booking. The booking that
gets moved is the one named by booking_id, and its owner is not compared with
the caller. Ticket eligibility is not re-checked either.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.core.config import get_settings
from hotel_booking.core.errors import ForbiddenError, NotFoundError
from hotel_booking.core.logging import get_logger
from hotel_booking.models.booking import Booking
from hotel_booking.models.ticket import TicketStatus
from hotel_booking.repositories import (
    booking_repository,
    enrollment_repository,
    room_repository,
    ticket_repository,
)

logger = get_logger(__name__)
settings = get_settings()


async def get_booking(db: AsyncSession, user_id: int) -> Booking:
    """Return the user's booking with its room. Raises NotFoundError if none."""
    booking = await booking_repository.find_booking_by_user_id(db, user_id)
    if not booking:
        raise NotFoundError()
    return booking


async def create_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    """Book a room for a user holding a paid, in-person, hotel-inclusive ticket."""
    await verify_ticket_eligibility(db, user_id)
    await verify_room_available(db, room_id)

    booking = await booking_repository.create_booking(db, user_id, room_id)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        room_id=room_id,
    )
    return booking


async def update_booking(
    db: AsyncSession,
    user_id: int,
    room_id: int,
    booking_id: int,
) -> Booking:
    """
    Move booking `booking_id` to `room_id`.
    The caller must have some booking; the target room must have a free place.
    """
    existing = await booking_repository.find_booking_by_user_id(db, user_id)
    if not existing:
        logger.info("booking_rejected", reason="no_booking", user_id=user_id)
        raise NotFoundError()

    await verify_room_available(db, room_id)

    booking = await booking_repository.update_booking(db, booking_id, room_id)
    if not booking:
        logger.info("booking_rejected", reason="booking_not_found", booking_id=booking_id)
        raise NotFoundError()

    if booking.user_id != user_id:
        logger.warning(
            "booking_updated_for_other_user",
            booking_id=booking_id,
            owner_id=booking.user_id,
            user_id=user_id,
        )

    logger.info(
        "booking_updated",
        booking_id=booking.id,
        user_id=user_id,
        room_id=room_id,
    )
    return booking


async def verify_ticket_eligibility(db: AsyncSession, user_id: int) -> None:
    enrollment = await enrollment_repository.find_with_address_by_user_id(db, user_id)
    if not enrollment:
        logger.info("booking_rejected", reason="no_enrollment", user_id=user_id)
        raise NotFoundError()

    ticket = await ticket_repository.find_ticket_by_enrollment_id(db, enrollment.id)
    if (
        not ticket
        or ticket.status == TicketStatus.RESERVED
        or ticket.ticket_type.is_remote
        or not ticket.ticket_type.includes_hotel
    ):
        logger.info(
            "booking_rejected",
            reason="ticket_not_eligible",
            user_id=user_id,
            ticket_id=ticket.id if ticket else None,
        )
        raise ForbiddenError()


async def verify_room_available(db: AsyncSession, room_id: int) -> None:
    room = await room_repository.find_room_by_id(
        db, room_id, for_update=settings.BOOKING_LOCK_ROOM_ROWS
    )
    if not room:
        logger.info("booking_rejected", reason="room_not_found", room_id=room_id)
        raise NotFoundError()

    if len(room.bookings) == room.capacity:
        logger.info(
            "booking_rejected",
            reason="room_full",
            room_id=room_id,
            capacity=room.capacity,
        )
        raise ForbiddenError()
