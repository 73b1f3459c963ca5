from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.models.ticket import Ticket


async def find_by_enrollment_id(db: AsyncSession, enrollment_id: int) -> Optional[Ticket]:
    """Ticket for an enrollment, with its TicketType eagerly joined."""
    result = await db.execute(select(Ticket).where(Ticket.enrollment_id == enrollment_id))
    return result.unique().scalar_one_or_none()
