"""
Booking endpoints: reserve a room, move to another room, view the booking.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.db.session import get_db
from hotel_booking.schemas.booking import BookingCreate, BookingIdResponse, BookingResponse
from hotel_booking.services.booking_service import create_booking, get_user_booking, update_booking
from hotel_booking.services.cache_service import invalidate_hotel_cache
from hotel_booking.core.security import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingIdResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a room.

    Requires a paid, in-person, hotel-inclusive ticket (402 otherwise) and a
    room with a free slot (403 when full). A user holds at most one booking (409).
    """
    booking = await create_booking(db, user_id, booking_data.room_id)
    # Commit before invalidating, or a concurrent hotel read could re-cache
    # the old availability
    await db.commit()
    await invalidate_hotel_cache()
    return BookingIdResponse(booking_id=booking.id)


@router.put("/{booking_id}", response_model=BookingIdResponse)
async def update_booking_endpoint(
    booking_id: str,
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Move the caller's booking to another room.

    `booking_id` is taken as a raw string; the service rejects anything that
    is not the caller's own booking id with 403.
    """
    booking = await update_booking(db, user_id, booking_id, booking_data.room_id)
    await db.commit()
    await invalidate_hotel_cache()
    return BookingIdResponse(booking_id=booking.id)


@router.get("/", response_model=BookingResponse)
async def get_booking_endpoint(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The authenticated user's booking with its room."""
    return await get_user_booking(db, user_id)
