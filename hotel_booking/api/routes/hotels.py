"""
Hotel endpoints with Redis caching, for users allowed to book.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.db.session import get_db
from hotel_booking.schemas.hotel import HotelResponse, HotelWithRoomsResponse
from hotel_booking.services.hotel_service import get_hotel_with_rooms, list_hotels
from hotel_booking.core.security import get_current_user_id

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.get("/", response_model=list[HotelResponse])
async def list_hotels_endpoint(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """All hotels. Cached; 402 unless the caller's ticket includes a hotel."""
    return await list_hotels(db, user_id)


@router.get("/{hotel_id}", response_model=HotelWithRoomsResponse)
async def get_hotel_endpoint(
    hotel_id: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """One hotel with its rooms and how many slots each has left."""
    return await get_hotel_with_rooms(db, user_id, hotel_id)
