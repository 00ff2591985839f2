from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import joinedload

from app.models.user_subscription import SubscriptionStatus, UserSubscription
from app.repositories.base import BaseRepository


class UserSubscriptionRepository(BaseRepository[UserSubscription]):
    model = UserSubscription

    def _active_filter(self, user_id: str):
        return (
            UserSubscription.user_id == user_id,
            UserSubscription.status == SubscriptionStatus.ACTIVE,
            UserSubscription.end_date >= datetime.utcnow(),
        )

    def get_active_subscription_by_user_id(self, user_id: str) -> Optional[UserSubscription]:
        """The active, unexpired subscription with the latest end date"""
        return (
            self.query()
            .options(joinedload(UserSubscription.plan))
            .filter(*self._active_filter(user_id))
            .order_by(UserSubscription.end_date.desc())
            .first()
        )

    def get_subscriptions_by_user_id(self, user_id: str) -> List[UserSubscription]:
        return (
            self.query()
            .options(joinedload(UserSubscription.plan))
            .filter(UserSubscription.user_id == user_id)
            .order_by(UserSubscription.created_at.desc())
            .all()
        )

    def get_by_stripe_subscription_id(self, stripe_subscription_id: str) -> Optional[UserSubscription]:
        if not stripe_subscription_id:
            return None
        return (
            self.query()
            .options(joinedload(UserSubscription.plan))
            .filter(UserSubscription.stripe_subscription_id == stripe_subscription_id)
            .first()
        )

    def has_active_subscription(self, user_id: str) -> bool:
        return self.exists(*self._active_filter(user_id))
