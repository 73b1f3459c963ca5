"""
Unit tests for the booking service with the repositories patched out.

These pin down the order of checks and that nothing is written when a
check fails, independent of any database.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from hotel_booking.core import errors
from hotel_booking.models import Ticket, TicketStatus, TicketType
from hotel_booking.repositories import (
    bookings_repository,
    enrollments_repository,
    rooms_repository,
    tickets_repository,
)
from hotel_booking.services import booking_service


def make_ticket(status=TicketStatus.PAID, is_remote=False, includes_hotel=True) -> Ticket:
    return Ticket(
        id=1,
        enrollment_id=1,
        status=status.value,
        ticket_type=TicketType(is_remote=is_remote, includes_hotel=includes_hotel),
    )


def make_room(room_id=1, capacity=4, version=1):
    return SimpleNamespace(id=room_id, capacity=capacity, version=version, hotel_id=1)


def make_booking(booking_id=10, room_id=1):
    return SimpleNamespace(id=booking_id, room_id=room_id, user_id=1)


@pytest.fixture
def db():
    return AsyncMock()


@pytest.fixture
def repos(monkeypatch):
    """Eligible user, room 1 (capacity 4, empty), no existing booking."""
    mocks = SimpleNamespace(
        find_enrollment=AsyncMock(return_value=SimpleNamespace(id=1, user_id=1)),
        find_ticket=AsyncMock(return_value=make_ticket()),
        find_room=AsyncMock(return_value=make_room()),
        claim=AsyncMock(return_value=True),
        count=AsyncMock(return_value=0),
        find_booking=AsyncMock(return_value=None),
        create=AsyncMock(return_value=make_booking()),
        update_room=AsyncMock(return_value=make_booking(room_id=2)),
    )
    monkeypatch.setattr(enrollments_repository, "find_by_user_id", mocks.find_enrollment)
    monkeypatch.setattr(tickets_repository, "find_by_enrollment_id", mocks.find_ticket)
    monkeypatch.setattr(rooms_repository, "find_by_id", mocks.find_room)
    monkeypatch.setattr(rooms_repository, "claim", mocks.claim)
    monkeypatch.setattr(bookings_repository, "count_by_room_id", mocks.count)
    monkeypatch.setattr(bookings_repository, "find_by_user_id", mocks.find_booking)
    monkeypatch.setattr(bookings_repository, "create", mocks.create)
    monkeypatch.setattr(bookings_repository, "update_room", mocks.update_room)
    return mocks


# --- create ---

@pytest.mark.asyncio
async def test_create_booking_success(db, repos):
    booking = await booking_service.create_booking(db, 1, 1)

    assert booking.id == 10
    repos.claim.assert_awaited_once_with(db, 1, 1)
    repos.create.assert_awaited_once_with(db, 1, 1)
    db.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_no_enrollment(db, repos):
    repos.find_enrollment.return_value = None

    with pytest.raises(errors.NotFoundError):
        await booking_service.create_booking(db, 1, 1)
    repos.find_ticket.assert_not_awaited()
    repos.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_no_ticket(db, repos):
    repos.find_ticket.return_value = None

    with pytest.raises(errors.NotFoundError):
        await booking_service.create_booking(db, 1, 1)
    repos.find_room.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ticket",
    [
        make_ticket(status=TicketStatus.RESERVED),
        make_ticket(is_remote=True, includes_hotel=False),
        make_ticket(includes_hotel=False),
    ],
    ids=["unpaid", "remote", "no-hotel"],
)
async def test_create_booking_payment_required(db, repos, ticket):
    repos.find_ticket.return_value = ticket

    with pytest.raises(errors.PaymentRequiredError) as exc_info:
        await booking_service.create_booking(db, 1, 1)
    assert exc_info.value.message == "You have not paid for your ticket yet"
    repos.find_room.assert_not_awaited()
    repos.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_existing_booking(db, repos):
    repos.find_booking.return_value = make_booking()

    with pytest.raises(errors.ConflictError):
        await booking_service.create_booking(db, 1, 2)
    repos.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_room_not_found(db, repos):
    repos.find_room.return_value = None

    with pytest.raises(errors.NotFoundError):
        await booking_service.create_booking(db, 1, 1)
    repos.count.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity,occupied", [(4, 4), (2, 3), (0, 0)])
async def test_create_booking_room_full(db, repos, capacity, occupied):
    repos.find_room.return_value = make_room(capacity=capacity)
    repos.count.return_value = occupied

    with pytest.raises(errors.RoomCapacityError) as exc_info:
        await booking_service.create_booking(db, 1, 1)
    assert exc_info.value.context["capacity"] == capacity
    repos.claim.assert_not_awaited()
    repos.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_retries_after_lost_claim(db, repos):
    """A concurrent writer bumped the version: roll back, re-read, re-count."""
    repos.find_room.side_effect = [make_room(version=1), make_room(version=2)]
    repos.claim.side_effect = [False, True]

    await booking_service.create_booking(db, 1, 1)

    db.rollback.assert_awaited_once()
    assert repos.count.await_count == 2
    assert repos.claim.await_args_list[1].args == (db, 1, 2)
    repos.create.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_booking_race_loser_sees_full_room(db, repos):
    """The winner took the last slot; the retry re-counts and rejects."""
    repos.find_room.return_value = make_room(capacity=1)
    repos.count.side_effect = [0, 1]
    repos.claim.return_value = False

    with pytest.raises(errors.RoomCapacityError):
        await booking_service.create_booking(db, 1, 1)
    repos.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_gives_up_after_max_attempts(db, repos):
    repos.claim.return_value = False

    with pytest.raises(errors.RoomCapacityError) as exc_info:
        await booking_service.create_booking(db, 1, 1)
    assert exc_info.value.context["attempts"] == booking_service.settings.BOOKING_MAX_RETRY_ATTEMPTS
    assert exc_info.value.message == "Room is full"
    assert db.rollback.await_count == booking_service.settings.BOOKING_MAX_RETRY_ATTEMPTS
    repos.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_booking_concurrent_duplicate_is_conflict(db, repos):
    """Both creates passed the existing-booking check; the unique index rejects one."""
    repos.create.side_effect = IntegrityError("INSERT INTO bookings", {}, Exception("uq_booking_user"))

    with pytest.raises(errors.ConflictError) as exc_info:
        await booking_service.create_booking(db, 1, 1)
    assert exc_info.value.context == {"reason": "booking_exists", "user_id": 1}


# --- not found ---

@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["enrollment", "ticket", "room"])
async def test_create_booking_not_found_message(db, repos, missing):
    getattr(repos, f"find_{missing}").return_value = None

    with pytest.raises(errors.NotFoundError) as exc_info:
        await booking_service.create_booking(db, 1, 1)
    assert exc_info.value.message == "No result for this search!"
    assert exc_info.value.context["resource"] == missing


# --- update ---

@pytest.mark.asyncio
@pytest.mark.parametrize("raw_id", ["abc", "-1", "", "1e3", -5, "1_0", "+5", "\u0663", "\u00b2"])
async def test_update_booking_malformed_id(db, repos, raw_id):
    with pytest.raises(errors.InvalidBookingIdError) as exc_info:
        await booking_service.update_booking(db, 1, raw_id, 2)
    assert isinstance(exc_info.value, errors.ForbiddenError)
    # Rejected before any persistence read
    repos.find_booking.assert_not_awaited()
    repos.find_enrollment.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_booking_without_booking(db, repos):
    with pytest.raises(errors.NoExistingBookingError):
        await booking_service.update_booking(db, 1, "10", 2)
    repos.find_enrollment.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_booking_id_mismatch(db, repos):
    repos.find_booking.return_value = make_booking(booking_id=10)

    with pytest.raises(errors.BookingOwnershipError):
        await booking_service.update_booking(db, 1, "11", 2)
    repos.update_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_booking_payment_required(db, repos):
    repos.find_booking.return_value = make_booking()
    repos.find_ticket.return_value = make_ticket(status=TicketStatus.RESERVED)

    with pytest.raises(errors.PaymentRequiredError):
        await booking_service.update_booking(db, 1, "10", 2)
    repos.update_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_booking_new_room_full(db, repos):
    repos.find_booking.return_value = make_booking(room_id=1)
    repos.find_room.return_value = make_room(room_id=2, capacity=2)
    repos.count.return_value = 2

    with pytest.raises(errors.RoomCapacityError):
        await booking_service.update_booking(db, 1, "10", 2)
    repos.count.assert_awaited_once_with(db, 2)
    repos.update_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_booking_success(db, repos):
    repos.find_booking.return_value = make_booking(booking_id=10, room_id=1)
    repos.find_room.return_value = make_room(room_id=2)

    booking = await booking_service.update_booking(db, 1, "10", 2)

    assert booking.room_id == 2
    repos.claim.assert_awaited_once_with(db, 2, 1)
    repos.update_room.assert_awaited_once_with(db, 10, 2)


@pytest.mark.asyncio
async def test_update_booking_same_room_is_noop(db, repos):
    repos.find_booking.return_value = make_booking(booking_id=10, room_id=1)

    booking = await booking_service.update_booking(db, 1, 10, 1)

    assert booking.id == 10
    repos.find_room.assert_not_awaited()
    repos.update_room.assert_not_awaited()


# --- read ---

@pytest.mark.asyncio
async def test_get_user_booking_not_found(db, repos):
    with pytest.raises(errors.NotFoundError) as exc_info:
        await booking_service.get_user_booking(db, 1)
    assert exc_info.value.message == "No result for this search!"
    repos.find_booking.assert_awaited_once_with(db, 1)


@pytest.mark.asyncio
async def test_get_user_booking(db, repos):
    repos.find_booking.return_value = make_booking()

    booking = await booking_service.get_user_booking(db, 1)
    assert booking.id == 10


def test_parse_booking_id_accepts_zero_and_padding():
    assert booking_service.parse_booking_id("0") == 0
    assert booking_service.parse_booking_id(" 42 ") == 42
