"""
Pydantic schemas for booking-related request/response validation.
"""

from pydantic import BaseModel, Field

from hotel_booking.schemas.hotel import RoomResponse


class BookingCreate(BaseModel):
    room_id: int = Field(..., gt=0)


class BookingIdResponse(BaseModel):
    booking_id: int


class BookingResponse(BaseModel):
    id: int
    room: RoomResponse

    model_config = {"from_attributes": True}
