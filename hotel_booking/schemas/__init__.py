from hotel_booking.schemas.user import UserCreate, UserResponse, UserLogin, Token
from hotel_booking.schemas.booking import BookingRoomBody, BookingResponse, BookingIdResponse, RoomResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "BookingRoomBody", "BookingResponse", "BookingIdResponse", "RoomResponse",
]
