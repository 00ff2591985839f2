import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status

from app.core.middleware import require_instructor
from app.models.fitness_class import ClassCategory
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work
from app.schemas.api import (ClassDetailResponse, ClassResponse, CreateClassRequest,
                             RosterEntryResponse)
from app.services.class_service import ClassService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_class_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> ClassService:
    """Dependency to get class service instance"""
    return ClassService(uow)


@router.get("", response_model=List[ClassResponse])
def list_classes_by_category(
    category: ClassCategory = Query(...),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Classes in one category, newest first"""
    logger.info(f"list_classes_by_category: Entry - category: {category.value}")
    classes = uow.fitness_classes.get_classes_by_category(category)
    logger.info(f"list_classes_by_category: Success - {len(classes)} classes")
    return classes


@router.get("/upcoming", response_model=List[ClassResponse])
def get_upcoming_classes(
    count: int = Query(10, ge=1, le=100),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Upcoming live classes, soonest first"""
    logger.info(f"get_upcoming_classes: Entry - count: {count}")
    classes = uow.fitness_classes.get_upcoming_live_classes(count)
    logger.info(f"get_upcoming_classes: Success - {len(classes)} classes")
    return classes


@router.get("/recorded", response_model=List[ClassResponse])
def get_recorded_classes(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    logger.info(f"get_recorded_classes: Entry - page: {page}, page_size: {page_size}")
    return uow.fitness_classes.get_recorded_classes(page, page_size)


@router.get("/search", response_model=List[ClassResponse])
def search_classes(
    q: str = Query(..., min_length=1, max_length=100),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    logger.info(f"search_classes: Entry - q: {q}")
    classes = uow.fitness_classes.search_classes(q)
    logger.info(f"search_classes: Success - {len(classes)} classes")
    return classes


@router.get("/instructor/{instructor_id}", response_model=List[ClassResponse])
def get_instructor_classes(
    instructor_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Every class taught by an instructor, newest first"""
    logger.info(f"get_instructor_classes: Entry - instructor: {instructor_id}")
    return uow.fitness_classes.get_classes_by_instructor(instructor_id)


@router.get("/{class_id}", response_model=ClassDetailResponse)
def get_class(
    class_id: int,
    class_service: ClassService = Depends(get_class_service),
):
    logger.info(f"get_class: Entry - class: {class_id}")
    fitness_class, booked_count = class_service.get_class_with_booking_count(class_id)

    response = ClassDetailResponse.model_validate(fitness_class)
    response.booked_count = booked_count
    return response


@router.get("/{class_id}/bookings", response_model=List[RosterEntryResponse])
def get_class_roster(
    class_id: int,
    instructor: User = Depends(require_instructor),
    class_service: ClassService = Depends(get_class_service),
):
    """
    Who has booked a class, in booking order.
    Requires being the class instructor, or the Admin role.
    """
    logger.info(f"get_class_roster: Entry - user: {instructor.id}, class: {class_id}")
    bookings = class_service.get_class_roster(instructor, class_id)

    roster = []
    for booking in bookings:
        entry = RosterEntryResponse.model_validate(booking)
        entry.user_name = booking.user.full_name
        entry.user_email = booking.user.email
        roster.append(entry)

    logger.info(f"get_class_roster: Success - class: {class_id}, {len(roster)} bookings")
    return roster


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
def create_class(
    request: CreateClassRequest,
    instructor: User = Depends(require_instructor),
    class_service: ClassService = Depends(get_class_service),
):
    """
    Create a class taught by the caller.
    Requires the Instructor or Admin role.
    """
    logger.info(f"create_class: Entry - user: {instructor.id}")
    fitness_class = class_service.create_class(instructor, **request.model_dump())
    logger.info(f"create_class: Success - class: {fitness_class.id}")
    return fitness_class
