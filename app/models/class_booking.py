from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime
import enum


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    ATTENDED = "attended"
    NO_SHOW = "no_show"


class ClassBooking(Base):
    __tablename__ = "class_bookings"
    # A user books a class once; cancelling changes the status instead of freeing the row
    __table_args__ = (
        UniqueConstraint("user_id", "class_id", name="uq_class_bookings_user_class"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(450), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    class_id = Column(Integer, ForeignKey("fitness_classes.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(BookingStatus, native_enum=False, length=20),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    booked_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    cancelled_at = Column(DateTime, nullable=True)
    attended_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="bookings")
    fitness_class = relationship("FitnessClass", back_populates="bookings")
