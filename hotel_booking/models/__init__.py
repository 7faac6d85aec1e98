from hotel_booking.models.user import User
from hotel_booking.models.session import Session
from hotel_booking.models.enrollment import Enrollment, Address
from hotel_booking.models.ticket import Ticket, TicketType, TicketStatus
from hotel_booking.models.hotel import Hotel, Room
from hotel_booking.models.booking import Booking

__all__ = [
    "User", "Session",
    "Enrollment", "Address",
    "Ticket", "TicketType", "TicketStatus",
    "Hotel", "Room",
    "Booking",
]
