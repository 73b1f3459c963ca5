"""
Room lookups and the optimistic-lock claim used by the booking service.
"""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.models.booking import Booking
from hotel_booking.models.hotel import Room


async def find_by_id(db: AsyncSession, room_id: int) -> Optional[Room]:
    # populate_existing: the version seen here must be the one in the database,
    # not whatever an earlier request left in the identity map
    result = await db.execute(
        select(Room).where(Room.id == room_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def claim(db: AsyncSession, room_id: int, version: int) -> bool:
    """
    Bump the room's version if it still equals `version`.

    Returns False when another transaction got there first, in which case
    whatever occupancy the caller counted may already be out of date.
    """
    result = await db.execute(
        update(Room)
        .where(Room.id == room_id, Room.version == version)
        .values(version=Room.version + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def find_by_hotel_id_with_occupancy(db: AsyncSession, hotel_id: int) -> list[tuple[Room, int]]:
    """All rooms of a hotel paired with their current booking count."""
    booked = func.count(Booking.id)
    result = await db.execute(
        select(Room, booked)
        .outerjoin(Booking, Booking.room_id == Room.id)
        .where(Room.hotel_id == hotel_id)
        .group_by(Room.id)
        .order_by(Room.id)
    )
    return [(room, count) for room, count in result.all()]
