"""
Pydantic schemas for hotel and room responses.
"""

from datetime import datetime
from pydantic import BaseModel


class HotelResponse(BaseModel):
    id: int
    name: str
    image: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoomResponse(BaseModel):
    id: int
    name: str
    capacity: int
    hotel_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoomAvailability(RoomResponse):
    booked: int
    available: int


class HotelWithRoomsResponse(HotelResponse):
    rooms: list[RoomAvailability]
