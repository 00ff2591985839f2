import logging
from typing import List, Optional, Tuple

from app.core.exceptions import ClassNotFoundError, ClassOwnershipError, PlanNotFoundError
from app.core.middleware import ADMIN
from app.models.class_booking import ClassBooking
from app.models.fitness_class import ClassCategory, ClassType, DifficultyLevel, FitnessClass
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork


class ClassService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.logger = logging.getLogger(__name__)

    def get_class_with_booking_count(self, class_id: int) -> Tuple[FitnessClass, int]:
        fitness_class = self.uow.fitness_classes.get_by_id(class_id)
        if fitness_class is None:
            raise ClassNotFoundError(f"Class not found: {class_id}")
        return fitness_class, self.uow.fitness_classes.get_booking_count(class_id)

    def get_class_roster(self, instructor: User, class_id: int) -> List[ClassBooking]:
        """Bookings for a class, in booking order. Only its instructor or an admin may look."""
        fitness_class = self.uow.fitness_classes.get_by_id(class_id)
        if fitness_class is None:
            raise ClassNotFoundError(f"Class not found: {class_id}")
        if fitness_class.instructor_id != instructor.id and ADMIN not in instructor.role_names:
            self.logger.warning(f"get_class_roster: Forbidden - user: {instructor.id}, class: {class_id}")
            raise ClassOwnershipError("Only the class instructor can view its roster")
        return self.uow.class_bookings.get_bookings_by_class_id(class_id)

    def create_class(
        self,
        instructor: User,
        title: str,
        class_type: ClassType,
        category: ClassCategory,
        duration_minutes: int,
        max_participants: int,
        difficulty: DifficultyLevel = DifficultyLevel.ALL_LEVELS,
        description: Optional[str] = None,
        scheduled_at=None,
        video_url: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
        minimum_plan_id: Optional[int] = None,
    ) -> FitnessClass:
        """Create a class taught by the given instructor"""
        self.logger.info(f"create_class: Entry - instructor: {instructor.id}, title: {title}")

        if minimum_plan_id is not None and self.uow.subscription_plans.get_by_id(minimum_plan_id) is None:
            raise PlanNotFoundError(f"Plan not found: {minimum_plan_id}")

        fitness_class = FitnessClass(
            title=title,
            description=description,
            class_type=class_type,
            category=category,
            difficulty=difficulty,
            duration_minutes=duration_minutes,
            max_participants=max_participants,
            scheduled_at=scheduled_at,
            is_live=class_type == ClassType.LIVE,
            video_url=video_url,
            thumbnail_url=thumbnail_url,
            instructor_id=instructor.id,
            instructor_name=instructor.full_name,
            minimum_plan_id=minimum_plan_id,
        )
        self.uow.fitness_classes.add(fitness_class)
        self.uow.save_changes()

        self.logger.info(f"create_class: Success - class: {fitness_class.id}")
        return fitness_class
