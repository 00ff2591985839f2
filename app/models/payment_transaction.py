from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime
import enum


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, enum.Enum):
    SUBSCRIPTION_PAYMENT = "subscription_payment"
    ONE_TIME_PAYMENT = "one_time_payment"
    REFUND = "refund"


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(450), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subscription_id = Column(Integer, ForeignKey("user_subscriptions.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    refund_amount = Column(Numeric(10, 2), nullable=True)
    currency = Column(String(10), nullable=False, default="INR")
    status = Column(
        Enum(PaymentStatus, native_enum=False, length=20),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    type = Column(
        Enum(PaymentType, native_enum=False, length=30),
        nullable=False,
        default=PaymentType.SUBSCRIPTION_PAYMENT,
    )
    description = Column(String(500), nullable=True)
    stripe_payment_intent_id = Column(String(100), nullable=True, index=True)
    stripe_charge_id = Column(String(100), nullable=True)
    stripe_invoice_id = Column(String(100), nullable=True)
    failure_reason = Column(String(500), nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="payments")
    subscription = relationship("UserSubscription")
