"""
Hotel and Room models.

Key design decisions:
- `capacity` is the room's total number of slots; occupancy is always the
  live COUNT of bookings referencing the room, never a stored counter
- `version` enables optimistic locking: every booking that lands on a room
  bumps it, so two requests racing for the last slot cannot both commit
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hotel_booking.db.base import Base, TimestampMixin


class Hotel(Base, TimestampMixin):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    image = Column(String(1000), nullable=False)

    rooms = relationship("Room", back_populates="hotel", lazy="noload", order_by="Room.id")

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name={self.name})>"


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    hotel = relationship("Hotel", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room", lazy="noload")

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="check_room_capacity_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, hotel={self.hotel_id}, capacity={self.capacity})>"
