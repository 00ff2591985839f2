from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import joinedload

from app.models.class_booking import BookingStatus, ClassBooking
from app.models.fitness_class import FitnessClass
from app.repositories.base import BaseRepository


class ClassBookingRepository(BaseRepository[ClassBooking]):
    model = ClassBooking

    def get_bookings_by_user_id(self, user_id: str) -> List[ClassBooking]:
        return (
            self.query()
            .options(joinedload(ClassBooking.fitness_class).joinedload(FitnessClass.instructor))
            .filter(ClassBooking.user_id == user_id)
            .order_by(ClassBooking.booked_at.desc())
            .all()
        )

    def get_bookings_by_class_id(self, class_id: int) -> List[ClassBooking]:
        return (
            self.query()
            .options(joinedload(ClassBooking.user))
            .filter(ClassBooking.class_id == class_id)
            .order_by(ClassBooking.booked_at.asc())
            .all()
        )

    def get_booking(self, user_id: str, class_id: int) -> Optional[ClassBooking]:
        return (
            self.query()
            .options(joinedload(ClassBooking.fitness_class))
            .filter(ClassBooking.user_id == user_id, ClassBooking.class_id == class_id)
            .first()
        )

    def has_booking(self, user_id: str, class_id: int) -> bool:
        return self.exists(
            ClassBooking.user_id == user_id,
            ClassBooking.class_id == class_id,
            ClassBooking.status != BookingStatus.CANCELLED,
        )

    def get_user_booking_count_for_month(self, user_id: str, month: int, year: int) -> int:
        start_date = datetime(year, month, 1)
        if month == 12:
            end_date = datetime(year + 1, 1, 1)
        else:
            end_date = datetime(year, month + 1, 1)

        return self.count(
            ClassBooking.user_id == user_id,
            ClassBooking.booked_at >= start_date,
            ClassBooking.booked_at < end_date,
            ClassBooking.status != BookingStatus.CANCELLED,
        )
