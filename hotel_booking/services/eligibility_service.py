"""
Eligibility gate shared by the booking and hotel services.

A user may see hotels and book rooms only with an enrollment whose ticket
is PAID, in-person and hotel-inclusive.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.core.errors import NotFoundError, PaymentRequiredError
from hotel_booking.core.logging import get_logger
from hotel_booking.repositories import enrollments_repository, tickets_repository

logger = get_logger(__name__)


async def ensure_can_book_hotel(db: AsyncSession, user_id: int) -> None:
    enrollment = await enrollments_repository.find_by_user_id(db, user_id)
    if not enrollment:
        raise NotFoundError(resource="enrollment", user_id=user_id)

    ticket = await tickets_repository.find_by_enrollment_id(db, enrollment.id)
    if not ticket:
        raise NotFoundError(resource="ticket", user_id=user_id, enrollment_id=enrollment.id)

    if not ticket.allows_hotel_booking:
        logger.info(
            "eligibility_denied",
            user_id=user_id,
            ticket_id=ticket.id,
            status=ticket.status,
            is_remote=ticket.ticket_type.is_remote,
            includes_hotel=ticket.ticket_type.includes_hotel,
        )
        raise PaymentRequiredError(ticket_id=ticket.id, status=ticket.status)
