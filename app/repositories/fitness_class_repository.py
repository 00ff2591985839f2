from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import joinedload

from app.models.class_booking import BookingStatus, ClassBooking
from app.models.fitness_class import ClassCategory, ClassType, FitnessClass
from app.repositories.base import BaseRepository


class FitnessClassRepository(BaseRepository[FitnessClass]):
    model = FitnessClass

    def get_by_id(self, class_id: int) -> Optional[FitnessClass]:
        return (
            self.query()
            .options(
                joinedload(FitnessClass.instructor),
                joinedload(FitnessClass.minimum_plan),
            )
            .filter(FitnessClass.id == class_id)
            .first()
        )

    def get_upcoming_live_classes(self, count: int = 10) -> List[FitnessClass]:
        return (
            self.query()
            .options(joinedload(FitnessClass.instructor))
            .filter(
                FitnessClass.is_live == True,  # noqa: E712
                FitnessClass.scheduled_at > datetime.utcnow(),
            )
            .order_by(FitnessClass.scheduled_at.asc())
            .limit(count)
            .all()
        )

    def get_recorded_classes(self, page: int = 1, page_size: int = 20) -> List[FitnessClass]:
        page = max(page, 1)
        return (
            self.query()
            .options(joinedload(FitnessClass.instructor))
            .filter(
                FitnessClass.class_type == ClassType.RECORDED,
                FitnessClass.video_url.isnot(None),
                FitnessClass.video_url != "",
            )
            .order_by(FitnessClass.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )

    def _newest_first(self):
        return func.coalesce(FitnessClass.scheduled_at, FitnessClass.created_at).desc()

    def get_classes_by_instructor(self, instructor_id: str) -> List[FitnessClass]:
        return (
            self.query()
            .filter(FitnessClass.instructor_id == instructor_id)
            .order_by(self._newest_first())
            .all()
        )

    def get_classes_by_category(self, category: ClassCategory) -> List[FitnessClass]:
        return (
            self.query()
            .options(joinedload(FitnessClass.instructor))
            .filter(FitnessClass.category == category)
            .order_by(self._newest_first())
            .all()
        )

    def search_classes(self, search_term: str) -> List[FitnessClass]:
        pattern = f"%{search_term.lower()}%"
        return (
            self.query()
            .options(joinedload(FitnessClass.instructor))
            .filter(
                or_(
                    func.lower(FitnessClass.title).like(pattern),
                    func.lower(FitnessClass.description).like(pattern),
                )
            )
            .order_by(FitnessClass.created_at.desc())
            .all()
        )

    def get_booking_count(self, class_id: int) -> int:
        return (
            self.db.query(ClassBooking)
            .filter(
                ClassBooking.class_id == class_id,
                ClassBooking.status != BookingStatus.CANCELLED,
            )
            .count()
        )
