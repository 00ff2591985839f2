"""
Domain exceptions raised by the service layer.

Each exception carries the HTTP status code the API layer answers with, so
the application-level handler can answer without knowing every subclass.
"""

from fastapi import status


class FitClassError(Exception):
    """Base class for expected, client-facing failures"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FitClassError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"


class UserNotFoundError(NotFoundError):
    error_code = "user_not_found"


class PlanNotFoundError(NotFoundError):
    error_code = "plan_not_found"


class ClassNotFoundError(NotFoundError):
    error_code = "class_not_found"


class BookingNotFoundError(NotFoundError):
    error_code = "booking_not_found"


class NoActiveSubscriptionError(NotFoundError):
    error_code = "no_active_subscription"


class PlanNotPurchasableError(FitClassError):
    error_code = "plan_not_purchasable"


class AlreadyBookedError(FitClassError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "already_booked"


class ClassFullError(FitClassError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "class_full"


class SubscriptionRequiredError(FitClassError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "subscription_required"


class PlanDoesNotCoverClassError(FitClassError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "plan_does_not_cover_class"


class BookingLimitReachedError(FitClassError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "booking_limit_reached"


class BookingOwnershipError(FitClassError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "not_booking_owner"


class ClassOwnershipError(FitClassError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "not_class_instructor"


class EmailInUseError(FitClassError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "email_in_use"
