from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from app.models.class_booking import BookingStatus
from app.models.fitness_class import ClassCategory, ClassType, DifficultyLevel
from app.models.payment_transaction import PaymentStatus, PaymentType
from app.models.user_subscription import SubscriptionStatus


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserResponse(ORMModel):
    id: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    profile_picture_url: Optional[str] = None
    bio: Optional[str] = None
    specializations: Optional[str] = None
    certifications: Optional[str] = None
    date_of_birth: Optional[date] = None
    is_active: bool
    role_names: List[str] = []


class PlanResponse(ORMModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    duration_in_days: int
    max_class_bookings_per_month: int
    includes_live_classes: bool
    includes_recorded_classes: bool
    is_active: bool


class ClassResponse(ORMModel):
    id: int
    title: str
    description: Optional[str] = None
    class_type: ClassType
    category: ClassCategory
    difficulty: DifficultyLevel
    duration_minutes: int
    max_participants: int
    scheduled_at: Optional[datetime] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_live: bool
    instructor_id: Optional[str] = None
    instructor_name: Optional[str] = None
    minimum_plan_id: Optional[int] = None


class ClassDetailResponse(ClassResponse):
    booked_count: int = 0


class CreateClassRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    class_type: ClassType
    category: ClassCategory
    difficulty: DifficultyLevel = DifficultyLevel.ALL_LEVELS
    duration_minutes: int = Field(..., gt=0)
    max_participants: int = Field(..., gt=0)
    scheduled_at: Optional[datetime] = None
    video_url: Optional[str] = Field(None, max_length=500)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    minimum_plan_id: Optional[int] = None


class BookingRequest(BaseModel):
    class_id: int


class BookingResponse(ORMModel):
    id: int
    user_id: str
    class_id: int
    status: BookingStatus
    booked_at: datetime
    cancelled_at: Optional[datetime] = None
    attended_at: Optional[datetime] = None


class RosterEntryResponse(BookingResponse):
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class SubscriptionResponse(ORMModel):
    id: int
    plan_id: int
    plan_name: Optional[str] = None
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime
    cancelled_at: Optional[datetime] = None
    stripe_subscription_id: Optional[str] = None


class CheckoutRequest(BaseModel):
    plan_id: int
    success_url: Optional[HttpUrl] = None
    cancel_url: Optional[HttpUrl] = None


class CheckoutResponse(BaseModel):
    checkout_url: str


class PaymentResponse(ORMModel):
    id: int
    subscription_id: Optional[int] = None
    amount: Decimal
    currency: str
    status: PaymentStatus
    type: PaymentType
    stripe_invoice_id: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
