from hotel_booking.schemas.user import UserCreate, UserResponse, UserLogin, Token
from hotel_booking.schemas.hotel import HotelResponse, RoomResponse, RoomAvailability, HotelWithRoomsResponse
from hotel_booking.schemas.booking import BookingCreate, BookingIdResponse, BookingResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "HotelResponse", "RoomResponse", "RoomAvailability", "HotelWithRoomsResponse",
    "BookingCreate", "BookingIdResponse", "BookingResponse",
]
