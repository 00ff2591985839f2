from typing import List, Optional

from sqlalchemy.orm import joinedload

from app.models.payment_transaction import PaymentTransaction
from app.models.user_subscription import UserSubscription
from app.repositories.base import BaseRepository


class PaymentTransactionRepository(BaseRepository[PaymentTransaction]):
    model = PaymentTransaction

    def get_transactions_by_user_id(self, user_id: str) -> List[PaymentTransaction]:
        return (
            self.query()
            .options(joinedload(PaymentTransaction.subscription).joinedload(UserSubscription.plan))
            .filter(PaymentTransaction.user_id == user_id)
            .order_by(PaymentTransaction.created_at.desc())
            .all()
        )

    def get_by_stripe_invoice_id(self, invoice_id: str) -> Optional[PaymentTransaction]:
        return self.first(PaymentTransaction.stripe_invoice_id == invoice_id)

    def get_transactions_by_subscription_id(self, subscription_id: int) -> List[PaymentTransaction]:
        return (
            self.query()
            .filter(PaymentTransaction.subscription_id == subscription_id)
            .order_by(PaymentTransaction.created_at.desc())
            .all()
        )
