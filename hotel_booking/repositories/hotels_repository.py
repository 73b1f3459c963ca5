from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.models.hotel import Hotel


async def find_all(db: AsyncSession) -> list[Hotel]:
    result = await db.execute(select(Hotel).order_by(Hotel.id))
    return list(result.scalars().all())


async def find_by_id(db: AsyncSession, hotel_id: int) -> Optional[Hotel]:
    result = await db.execute(select(Hotel).where(Hotel.id == hotel_id))
    return result.scalar_one_or_none()
