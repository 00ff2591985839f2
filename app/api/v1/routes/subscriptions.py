import logging
from typing import List

import stripe
from fastapi import APIRouter, Depends

from app.core.exceptions import NoActiveSubscriptionError
from app.core.middleware import require_authenticated_user
from app.core.stripe_client import get_stripe_client
from app.models.user import User
from app.models.user_subscription import UserSubscription
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work
from app.schemas.api import CheckoutRequest, CheckoutResponse, SubscriptionResponse
from app.services.payment_service import StripePaymentService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_payment_service(
    uow: UnitOfWork = Depends(get_unit_of_work),
    client: stripe.StripeClient = Depends(get_stripe_client),
) -> StripePaymentService:
    """Dependency to get payment service instance"""
    return StripePaymentService(uow, client)


def _to_response(subscription: UserSubscription) -> SubscriptionResponse:
    response = SubscriptionResponse.model_validate(subscription)
    response.plan_name = subscription.plan.name if subscription.plan else None
    return response


@router.get("/current", response_model=SubscriptionResponse)
def get_current_subscription(
    user: User = Depends(require_authenticated_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get current user's active subscription.
    Requires authentication.
    """
    logger.info(f"get_current_subscription: Entry - user: {user.id}")

    subscription = uow.user_subscriptions.get_active_subscription_by_user_id(user.id)
    if subscription is None:
        logger.info(f"get_current_subscription: No active subscription - user: {user.id}")
        raise NoActiveSubscriptionError("No active subscription found")

    logger.info(f"get_current_subscription: Success - user: {user.id}")
    return _to_response(subscription)


@router.get("/history", response_model=List[SubscriptionResponse])
def get_subscription_history(
    user: User = Depends(require_authenticated_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    logger.info(f"get_subscription_history: Entry - user: {user.id}")
    subscriptions = uow.user_subscriptions.get_subscriptions_by_user_id(user.id)
    return [_to_response(s) for s in subscriptions]


@router.post("/checkout", response_model=CheckoutResponse)
def create_checkout(
    request: CheckoutRequest,
    user: User = Depends(require_authenticated_user),
    payment_service: StripePaymentService = Depends(get_payment_service),
):
    """
    Start a Stripe Checkout session for a plan.
    The subscription row is created when Stripe reports it via webhook.
    """
    logger.info(f"create_checkout: Entry - user: {user.id}, plan: {request.plan_id}")
    url = payment_service.start_checkout(
        user.id,
        request.plan_id,
        success_url=str(request.success_url) if request.success_url else None,
        cancel_url=str(request.cancel_url) if request.cancel_url else None,
    )
    logger.info(f"create_checkout: Success - user: {user.id}")
    return CheckoutResponse(checkout_url=url)


@router.post("/cancel", response_model=SubscriptionResponse)
def cancel_subscription(
    user: User = Depends(require_authenticated_user),
    payment_service: StripePaymentService = Depends(get_payment_service),
):
    logger.info(f"cancel_subscription: Entry - user: {user.id}")
    subscription = payment_service.cancel_user_subscription(user.id)
    logger.info(f"cancel_subscription: Success - user: {user.id}")
    return _to_response(subscription)
