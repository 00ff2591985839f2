from app.repositories.base import BaseRepository
from app.repositories.user_repository import UserRepository
from app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from app.repositories.user_subscription_repository import UserSubscriptionRepository
from app.repositories.fitness_class_repository import FitnessClassRepository
from app.repositories.class_booking_repository import ClassBookingRepository
from app.repositories.payment_transaction_repository import PaymentTransactionRepository
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work

__all__ = [
    "BaseRepository",
    "UserRepository",
    "SubscriptionPlanRepository",
    "UserSubscriptionRepository",
    "FitnessClassRepository",
    "ClassBookingRepository",
    "PaymentTransactionRepository",
    "UnitOfWork",
    "get_unit_of_work",
]
