import logging
from typing import List

from fastapi import APIRouter, Depends

from app.core.exceptions import NotFoundError
from app.core.middleware import ADMIN, require_admin, require_authenticated_user
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work
from app.schemas.api import PaymentResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[PaymentResponse])
def list_my_payments(
    user: User = Depends(require_authenticated_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Get the caller's payment history, newest first"""
    logger.info(f"list_my_payments: Entry - user: {user.id}")
    return uow.payment_transactions.get_transactions_by_user_id(user.id)


@router.get("/subscription/{subscription_id}", response_model=List[PaymentResponse])
def list_subscription_payments(
    subscription_id: int,
    user: User = Depends(require_authenticated_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Payments made against one subscription; other members' subscriptions look absent"""
    logger.info(f"list_subscription_payments: Entry - user: {user.id}, subscription: {subscription_id}")

    subscription = uow.user_subscriptions.get_by_id(subscription_id)
    if subscription is None or (subscription.user_id != user.id and ADMIN not in user.role_names):
        raise NotFoundError(f"Subscription not found: {subscription_id}")

    return uow.payment_transactions.get_transactions_by_subscription_id(subscription_id)


@router.get("/user/{user_id}", response_model=List[PaymentResponse])
def list_user_payments(
    user_id: str,
    admin: User = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get any user's payment history.
    Requires the Admin role.
    """
    logger.info(f"list_user_payments: Entry - admin: {admin.id}, user: {user_id}")
    return uow.payment_transactions.get_transactions_by_user_id(user_id)
