"""
Enrollment: a user's registration for the event. Required before a ticket
can exist, and therefore before any booking.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hotel_booking.db.base import Base, TimestampMixin


class Enrollment(Base, TimestampMixin):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    cpf = Column(String(14), nullable=False)
    birthday = Column(Date, nullable=False)
    phone = Column(String(20), nullable=False)

    user = relationship("User", back_populates="enrollment")
    ticket = relationship("Ticket", back_populates="enrollment", uselist=False, lazy="noload")

    def __repr__(self) -> str:
        return f"<Enrollment(id={self.id}, user={self.user_id})>"
