"""
Pydantic schemas for booking-related request/response validation.

Booking payloads use camelCase on the wire (roomId, bookingId, hotelId),
except the nested room of a booking, which is keyed "Room";
both match the format the event platform's clients already speak.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BookingRoomBody(CamelModel):
    room_id: int


class RoomResponse(CamelModel):
    id: int
    name: str
    capacity: int
    hotel_id: int
    created_at: datetime
    updated_at: datetime


class BookingResponse(CamelModel):
    """The user's booking. Owner, room foreign key and timestamps are left out."""

    id: int
    room: RoomResponse = Field(alias="Room")


class BookingIdResponse(CamelModel):
    booking_id: int
