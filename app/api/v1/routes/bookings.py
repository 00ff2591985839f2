import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.core.middleware import require_authenticated_user
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work
from app.schemas.api import BookingRequest, BookingResponse
from app.services.booking_service import BookingService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_booking_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> BookingService:
    """Dependency to get booking service instance"""
    return BookingService(uow)


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    user: User = Depends(require_authenticated_user),
    booking_service: BookingService = Depends(get_booking_service),
):
    """Get the caller's bookings, newest first"""
    logger.info(f"list_bookings: Entry - user: {user.id}")
    bookings = booking_service.list_user_bookings(user.id)
    logger.info(f"list_bookings: Success - user: {user.id}, {len(bookings)} bookings")
    return bookings


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def book_class(
    request: BookingRequest,
    user: User = Depends(require_authenticated_user),
    booking_service: BookingService = Depends(get_booking_service),
):
    """
    Book a class.
    Requires an active subscription whose plan covers the class.
    """
    logger.info(f"book_class: Entry - user: {user.id}, class: {request.class_id}")
    booking = booking_service.book_class(user.id, request.class_id)
    logger.info(f"book_class: Success - booking: {booking.id}")
    return booking


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    user: User = Depends(require_authenticated_user),
    booking_service: BookingService = Depends(get_booking_service),
):
    logger.info(f"cancel_booking: Entry - user: {user.id}, booking: {booking_id}")
    booking = booking_service.cancel_booking(user.id, booking_id)
    logger.info(f"cancel_booking: Success - booking: {booking_id}")
    return booking
