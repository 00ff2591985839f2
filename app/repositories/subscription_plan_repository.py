from typing import List, Optional

from app.models.subscription_plan import SubscriptionPlan
from app.repositories.base import BaseRepository


class SubscriptionPlanRepository(BaseRepository[SubscriptionPlan]):
    model = SubscriptionPlan

    def get_active_plans(self) -> List[SubscriptionPlan]:
        """Active plans, cheapest first.

        Sorted in Python on the float value: SQLite cannot ORDER BY a
        fixed-point column reliably.
        """
        plans = self.find(SubscriptionPlan.is_active == True)  # noqa: E712
        return sorted(plans, key=lambda plan: float(plan.price))

    def get_by_stripe_price_id(self, stripe_price_id: str) -> Optional[SubscriptionPlan]:
        if not stripe_price_id:
            return None
        return self.first(SubscriptionPlan.stripe_price_id == stripe_price_id)

    def get_by_stripe_product_id(self, stripe_product_id: str) -> Optional[SubscriptionPlan]:
        if not stripe_product_id:
            return None
        return self.first(SubscriptionPlan.stripe_product_id == stripe_product_id)
