from sqlalchemy import Column, Integer, String, DateTime, Boolean, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime


class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_subscription_plans_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    duration_in_days = Column(Integer, nullable=False, default=30)
    max_class_bookings_per_month = Column(Integer, nullable=False, default=0)  # 0 = unlimited
    includes_live_classes = Column(Boolean, default=False, nullable=False)
    includes_recorded_classes = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    stripe_price_id = Column(String(100), nullable=True, index=True)
    stripe_product_id = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user_subscriptions = relationship("UserSubscription", back_populates="plan")

    @property
    def has_unlimited_bookings(self) -> bool:
        return not self.max_class_bookings_per_month
