from app.models.user import User, Role, user_roles
from app.models.subscription_plan import SubscriptionPlan
from app.models.user_subscription import UserSubscription, SubscriptionStatus
from app.models.fitness_class import FitnessClass, ClassType, ClassCategory, DifficultyLevel
from app.models.class_booking import ClassBooking, BookingStatus
from app.models.payment_transaction import PaymentTransaction, PaymentStatus, PaymentType

__all__ = [
    "User", "Role", "user_roles",
    "SubscriptionPlan",
    "UserSubscription", "SubscriptionStatus",
    "FitnessClass", "ClassType", "ClassCategory", "DifficultyLevel",
    "ClassBooking", "BookingStatus",
    "PaymentTransaction", "PaymentStatus", "PaymentType",
]
