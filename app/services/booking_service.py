import logging
from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (AlreadyBookedError, BookingLimitReachedError,
                                 BookingNotFoundError, BookingOwnershipError,
                                 ClassFullError, ClassNotFoundError,
                                 PlanDoesNotCoverClassError,
                                 SubscriptionRequiredError)
from app.models.class_booking import BookingStatus, ClassBooking
from app.models.fitness_class import ClassType, FitnessClass
from app.models.subscription_plan import SubscriptionPlan
from app.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.logger = logging.getLogger(__name__)

    def book_class(self, user_id: str, class_id: int) -> ClassBooking:
        """Book a class for a user holding a subscription that covers it"""
        self.logger.info(f"book_class: Entry - user: {user_id}, class: {class_id}")

        fitness_class = self.uow.fitness_classes.get_by_id(class_id)
        if fitness_class is None:
            raise ClassNotFoundError(f"Class not found: {class_id}")

        # Cancelled bookings keep their row, so any existing row blocks a rebooking
        if self.uow.class_bookings.get_booking(user_id, class_id) is not None:
            raise AlreadyBookedError("You have already booked this class")

        subscription = self.uow.user_subscriptions.get_active_subscription_by_user_id(user_id)
        if subscription is None:
            raise SubscriptionRequiredError("An active subscription is required to book classes")

        self._check_plan_covers_class(subscription.plan, fitness_class)

        if self.uow.fitness_classes.get_booking_count(class_id) >= fitness_class.max_participants:
            raise ClassFullError("This class is fully booked")

        plan = subscription.plan
        if not plan.has_unlimited_bookings:
            now = datetime.utcnow()
            booked_this_month = self.uow.class_bookings.get_user_booking_count_for_month(
                user_id, now.month, now.year)
            if booked_this_month >= plan.max_class_bookings_per_month:
                raise BookingLimitReachedError(
                    f"Your plan allows {plan.max_class_bookings_per_month} bookings per month")

        booking = ClassBooking(
            user_id=user_id,
            class_id=class_id,
            status=BookingStatus.CONFIRMED,
            booked_at=datetime.utcnow(),
        )
        self.uow.class_bookings.add(booking)
        try:
            self.uow.save_changes()
        except IntegrityError:
            # Lost a race against a concurrent booking for the same pair
            raise AlreadyBookedError("You have already booked this class")

        self.logger.info(f"book_class: Success - user: {user_id}, booking: {booking.id}")
        return booking

    def _check_plan_covers_class(self, plan: SubscriptionPlan, fitness_class: FitnessClass):
        if fitness_class.class_type == ClassType.LIVE and not plan.includes_live_classes:
            raise PlanDoesNotCoverClassError(f"The {plan.name} plan does not include live classes")
        if fitness_class.class_type == ClassType.RECORDED and not plan.includes_recorded_classes:
            raise PlanDoesNotCoverClassError(f"The {plan.name} plan does not include recorded classes")

        minimum_plan = fitness_class.minimum_plan
        if minimum_plan is not None and float(plan.price) < float(minimum_plan.price):
            raise PlanDoesNotCoverClassError(f"This class requires the {minimum_plan.name} plan or higher")

    def cancel_booking(self, user_id: str, booking_id: int) -> ClassBooking:
        self.logger.info(f"cancel_booking: Entry - user: {user_id}, booking: {booking_id}")

        booking = self.uow.class_bookings.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking not found: {booking_id}")
        if booking.user_id != user_id:
            raise BookingOwnershipError("You can only cancel your own bookings")

        if booking.status != BookingStatus.CANCELLED:
            booking.status = BookingStatus.CANCELLED
            booking.cancelled_at = datetime.utcnow()
            self.uow.save_changes()

        self.logger.info(f"cancel_booking: Success - booking: {booking_id}")
        return booking

    def list_user_bookings(self, user_id: str) -> List[ClassBooking]:
        return self.uow.class_bookings.get_bookings_by_user_id(user_id)
