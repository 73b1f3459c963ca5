"""
Domain errors raised by the booking and hotel services.

The hierarchy is closed: every concrete class has an entry in ERROR_STATUS,
and the API layer translates them through that table only.

    BookingError
    ├── NotFoundError
    ├── PaymentRequiredError
    ├── RoomCapacityError
    ├── ConflictError
    ├── InvalidParamsError
    └── ForbiddenError
        ├── InvalidBookingIdError
        ├── NoExistingBookingError
        └── BookingOwnershipError

The Forbidden subtypes all answer 403 but carry their own `code` so callers
can tell malformed input apart from a rule violation.

Each kind has one fixed message; what differs between raise sites goes into
the keyword context.
"""

from typing import Any

from fastapi import status


class BookingError(Exception):
    code: str = "booking_error"
    message: str = "Booking request failed"

    def __init__(self, **context: Any):
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.code, "context": self.context}

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code}, context={self.context})>"


class NotFoundError(BookingError):
    code = "not_found"
    message = "No result for this search!"


class PaymentRequiredError(BookingError):
    code = "payment_required"
    message = "You have not paid for your ticket yet"


class RoomCapacityError(BookingError):
    code = "room_capacity"
    message = "Room is full"


class ConflictError(BookingError):
    code = "conflict"
    message = "Conflict with the current state of the resource"


class InvalidParamsError(BookingError):
    code = "invalid_params"
    message = "Invalid params"


class ForbiddenError(BookingError):
    code = "forbidden"
    message = "Insufficient rights to a resource"


class InvalidBookingIdError(ForbiddenError):
    code = "invalid_booking_id"
    message = "Booking id must be a non-negative integer"


class NoExistingBookingError(ForbiddenError):
    code = "no_existing_booking"
    message = "You have no booking to change"


class BookingOwnershipError(ForbiddenError):
    code = "booking_ownership"
    message = "Booking does not belong to you"


ERROR_STATUS: dict[type[BookingError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PaymentRequiredError: status.HTTP_402_PAYMENT_REQUIRED,
    RoomCapacityError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidParamsError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    InvalidBookingIdError: status.HTTP_403_FORBIDDEN,
    NoExistingBookingError: status.HTTP_403_FORBIDDEN,
    BookingOwnershipError: status.HTTP_403_FORBIDDEN,
}


def status_for(error: BookingError) -> int:
    """HTTP status for a domain error. Raises KeyError for unmapped classes."""
    return ERROR_STATUS[type(error)]
