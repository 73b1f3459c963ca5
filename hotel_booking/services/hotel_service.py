"""
Hotel catalogue for ticket holders.

Only users who could book a room may browse hotels, so both reads run the
eligibility gate before touching the cache or the database.
"""

from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.core.errors import InvalidParamsError, NotFoundError
from hotel_booking.core.logging import get_logger
from hotel_booking.repositories import hotels_repository, rooms_repository
from hotel_booking.schemas.hotel import (
    HotelResponse,
    HotelWithRoomsResponse,
    RoomAvailability,
    RoomResponse,
)
from hotel_booking.services import cache_service
from hotel_booking.services.eligibility_service import ensure_can_book_hotel

logger = get_logger(__name__)


def parse_hotel_id(raw: Union[str, int]) -> int:
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidParamsError(hotel_id=str(raw))
    return int(text)


async def list_hotels(db: AsyncSession, user_id: int) -> list[dict]:
    await ensure_can_book_hotel(db, user_id)

    cached = await cache_service.get_cached(cache_service.HOTEL_LIST_KEY)
    if cached:
        logger.info("hotels_list_cache_hit")
        return cached

    hotels = await hotels_repository.find_all(db)
    if not hotels:
        raise NotFoundError(resource="hotels")

    data = [HotelResponse.model_validate(h).model_dump(mode="json") for h in hotels]
    await cache_service.set_cached(cache_service.HOTEL_LIST_KEY, data)
    return data


async def get_hotel_with_rooms(db: AsyncSession, user_id: int, hotel_id: Union[str, int]) -> dict:
    """
    One hotel with every room and its live availability.
    `available` is capacity minus current bookings, never below zero.
    """
    hotel_id = parse_hotel_id(hotel_id)
    await ensure_can_book_hotel(db, user_id)

    key = cache_service.hotel_detail_key(hotel_id)
    cached = await cache_service.get_cached(key)
    if cached:
        logger.info("hotel_detail_cache_hit", hotel_id=hotel_id)
        return cached

    hotel = await hotels_repository.find_by_id(db, hotel_id)
    if not hotel:
        raise NotFoundError(resource="hotel", hotel_id=hotel_id)

    rooms = [
        RoomAvailability(
            **RoomResponse.model_validate(room).model_dump(),
            booked=booked,
            available=max(room.capacity - booked, 0),
        )
        for room, booked in await rooms_repository.find_by_hotel_id_with_occupancy(db, hotel_id)
    ]
    data = HotelWithRoomsResponse(
        **HotelResponse.model_validate(hotel).model_dump(),
        rooms=rooms,
    ).model_dump(mode="json")

    await cache_service.set_cached(key, data)
    return data
