import logging
from typing import List

from fastapi import APIRouter, Depends

from app.core.exceptions import PlanNotFoundError
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work
from app.schemas.api import PlanResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[PlanResponse])
def list_plans(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Get all active subscription plans, cheapest first.
    Public endpoint - no authentication required.
    """
    logger.info("list_plans: Entry")
    plans = uow.subscription_plans.get_active_plans()
    logger.info(f"list_plans: Success - {len(plans)} plans")
    return plans


@router.get("/{plan_id}", response_model=PlanResponse)
def get_plan(plan_id: int, uow: UnitOfWork = Depends(get_unit_of_work)):
    logger.info(f"get_plan: Entry - plan: {plan_id}")
    plan = uow.subscription_plans.get_by_id(plan_id)
    if plan is None:
        logger.info(f"get_plan: Not found - plan: {plan_id}")
        raise PlanNotFoundError(f"Plan not found: {plan_id}")
    return plan
