"""
Booking service: create, change and read a user's hotel room booking.

VALIDATION PIPELINE
===================

  enrollment -> ticket -> PAID / in-person / hotel-inclusive
             -> room exists -> room has a free slot -> write

Every step raises a domain error from hotel_booking.core.errors and aborts the request;
the request session is rolled back by get_db, so a rejected booking never
leaves a half-written row behind.

CAPACITY MODEL
==============

`rooms.capacity` is the total number of slots. Occupancy is the live
COUNT(*) of bookings pointing at the room. There is no "remaining seats"
column to drift out of sync: moving a booking from room A to room B frees
a slot in A and takes one in B by the same UPDATE.

CONCURRENCY STRATEGY: Optimistic Locking with Retry
====================================================

Problem:
  Two users try to book the last slot of a room simultaneously.
  Both count occupancy = capacity - 1, both insert. Result: overbooking.

Solution:
  Each room carries a `version` column.

  1. Read the room (and its version), count its bookings
  2. UPDATE rooms SET version = version + 1
     WHERE id = :room_id AND version = :seen_version
  3. If rows_affected == 0, someone else booked into this room after our
     read -> roll back, re-read, re-count, retry
  4. Insert / re-point the booking in the same transaction as step 2

  The loser of a race on the last slot re-counts on retry, sees the room
  full and gets RoomCapacityError.
"""

from typing import Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.core.config import get_settings
from hotel_booking.core.errors import (
    BookingError,
    BookingOwnershipError,
    ConflictError,
    InvalidBookingIdError,
    NoExistingBookingError,
    NotFoundError,
    RoomCapacityError,
)
from hotel_booking.core.logging import get_logger
from hotel_booking.core.metrics import record_booking_attempt, record_booking_retry
from hotel_booking.models.booking import Booking
from hotel_booking.models.hotel import Room
from hotel_booking.repositories import bookings_repository, rooms_repository
from hotel_booking.services.eligibility_service import ensure_can_book_hotel

logger = get_logger(__name__)
settings = get_settings()


def parse_booking_id(raw: Union[str, int]) -> int:
    """
    Booking ids arrive as path segments; only plain ASCII digit strings are
    accepted. int() alone would also take "+5", "1_0" and non-ASCII digits.
    """
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidBookingIdError(booking_id=str(raw))
    return int(text)


async def _reserve_slot(db: AsyncSession, room_id: int) -> Room:
    """
    Check the room has a free slot and claim it with the optimistic lock.
    Retries up to BOOKING_MAX_RETRY_ATTEMPTS on version conflicts.
    Leaves the transaction open so the caller's write lands in it.
    """
    max_attempts = settings.BOOKING_MAX_RETRY_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        room = await rooms_repository.find_by_id(db, room_id)
        if not room:
            raise NotFoundError(resource="room", room_id=room_id)

        capacity, version = room.capacity, room.version
        occupied = await bookings_repository.count_by_room_id(db, room_id)
        if occupied >= capacity:
            logger.warning(
                "booking_rejected_capacity",
                room_id=room_id,
                capacity=capacity,
                occupied=occupied,
            )
            raise RoomCapacityError(room_id=room_id, capacity=capacity, occupied=occupied)

        if await rooms_repository.claim(db, room_id, version):
            return room

        logger.info(
            "booking_retry",
            room_id=room_id,
            attempt=attempt,
            reason="version_conflict",
        )
        record_booking_retry()
        # Drop the stale snapshot so the next read sees the winner's commit
        await db.rollback()

    raise RoomCapacityError(room_id=room_id, attempts=max_attempts, reason="version_conflict")


async def create_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    """Book `room_id` for a user who has no booking yet."""
    try:
        await ensure_can_book_hotel(db, user_id)

        existing = await bookings_repository.find_by_user_id(db, user_id)
        if existing:
            raise ConflictError(reason="booking_exists", booking_id=existing.id)

        await _reserve_slot(db, room_id)
        try:
            booking = await bookings_repository.create(db, user_id, room_id)
        except IntegrityError:
            # A concurrent create for the same user won the uq_booking_user race
            raise ConflictError(reason="booking_exists", user_id=user_id)
    except BookingError as e:
        record_booking_attempt("create", e.code)
        raise

    record_booking_attempt("create", "success")
    logger.info("booking_created", booking_id=booking.id, user_id=user_id, room_id=room_id)
    return booking


async def update_booking(
    db: AsyncSession,
    user_id: int,
    booking_id: Union[str, int],
    room_id: int,
) -> Booking:
    """
    Move the user's booking to another room.

    `booking_id` must name the caller's own booking. The lookup is keyed by
    user, and the supplied id is then checked against what was found.
    """
    try:
        requested_id = parse_booking_id(booking_id)

        booking = await bookings_repository.find_by_user_id(db, user_id)
        if not booking:
            raise NoExistingBookingError(user_id=user_id)
        # Plain ints from here on: a retry in _reserve_slot rolls back and
        # expires every loaded instance
        current_id, current_room_id = booking.id, booking.room_id

        if current_id != requested_id:
            logger.warning(
                "booking_update_denied",
                user_id=user_id,
                requested_booking_id=requested_id,
            )
            raise BookingOwnershipError(booking_id=requested_id)

        await ensure_can_book_hotel(db, user_id)

        if current_room_id == room_id:
            record_booking_attempt("update", "unchanged")
            return booking

        await _reserve_slot(db, room_id)
        booking = await bookings_repository.update_room(db, current_id, room_id)
    except BookingError as e:
        record_booking_attempt("update", e.code)
        raise

    record_booking_attempt("update", "success")
    logger.info(
        "booking_updated",
        booking_id=current_id,
        user_id=user_id,
        from_room_id=current_room_id,
        to_room_id=room_id,
    )
    return booking


async def get_user_booking(db: AsyncSession, user_id: int) -> Booking:
    """The user's booking with its room."""
    booking = await bookings_repository.find_by_user_id(db, user_id)
    if not booking:
        raise NotFoundError(resource="booking", user_id=user_id)
    return booking
