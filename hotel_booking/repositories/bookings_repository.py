from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.models.booking import Booking


async def create(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    booking = Booking(user_id=user_id, room_id=room_id)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    return booking


async def count_by_room_id(db: AsyncSession, room_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Booking).where(Booking.room_id == room_id)
    )
    return result.scalar_one()


async def find_by_user_id(db: AsyncSession, user_id: int) -> Optional[Booking]:
    """The user's booking with its Room loaded, or None."""
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def update_room(db: AsyncSession, booking_id: int, room_id: int) -> Booking:
    await db.execute(
        update(Booking)
        .where(Booking.id == booking_id)
        .values(room_id=room_id, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
