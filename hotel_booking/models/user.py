"""
User model with secure password storage.
"""

from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship

from hotel_booking.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # One-to-one in practice: both sides carry a unique user_id
    enrollment = relationship("Enrollment", back_populates="user", uselist=False, lazy="noload")
    booking = relationship("Booking", back_populates="user", uselist=False, lazy="noload")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
