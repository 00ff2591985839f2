from sqlalchemy import Column, Integer, String, DateTime, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime
import enum


class ClassType(str, enum.Enum):
    LIVE = "live"
    RECORDED = "recorded"


class ClassCategory(str, enum.Enum):
    YOGA = "yoga"
    HIIT = "hiit"
    STRENGTH = "strength"
    CARDIO = "cardio"
    PILATES = "pilates"
    DANCE = "dance"
    CYCLING = "cycling"
    BOXING = "boxing"
    STRETCHING = "stretching"
    MEDITATION = "meditation"


class DifficultyLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ALL_LEVELS = "all_levels"


class FitnessClass(Base):
    __tablename__ = "fitness_classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(String(2000), nullable=True)
    class_type = Column(Enum(ClassType, native_enum=False, length=20), nullable=False, default=ClassType.LIVE)
    category = Column(Enum(ClassCategory, native_enum=False, length=20), nullable=False, index=True)
    difficulty = Column(
        Enum(DifficultyLevel, native_enum=False, length=20),
        nullable=False,
        default=DifficultyLevel.ALL_LEVELS,
    )
    duration_minutes = Column(Integer, nullable=False, default=45)
    max_participants = Column(Integer, nullable=False, default=20)
    scheduled_at = Column(DateTime, nullable=True, index=True)  # null for on-demand recordings
    is_live = Column(Boolean, default=False, nullable=False)
    thumbnail_url = Column(String(500), nullable=True)
    video_url = Column(String(500), nullable=True)  # recorded classes
    stream_url = Column(String(500), nullable=True)  # live classes
    meeting_id = Column(String(100), nullable=True)
    instructor_id = Column(String(450), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    instructor_name = Column(String(200), nullable=True)
    minimum_plan_id = Column(Integer, ForeignKey("subscription_plans.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    instructor = relationship("User", back_populates="instructed_classes")
    minimum_plan = relationship("SubscriptionPlan")
    bookings = relationship("ClassBooking", back_populates="fitness_class", cascade="all, delete-orphan")
