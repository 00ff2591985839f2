import json
import logging
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

import stripe
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.exceptions import (NoActiveSubscriptionError, PlanNotFoundError,
                                 PlanNotPurchasableError, UserNotFoundError)
from app.models.payment_transaction import (PaymentStatus, PaymentTransaction,
                                            PaymentType)
from app.models.subscription_plan import SubscriptionPlan
from app.models.user import User
from app.models.user_subscription import SubscriptionStatus, UserSubscription
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.stripe_events import (CheckoutSessionCompletedEvent,
                                       InvoicePaidEvent,
                                       InvoicePaymentFailedEvent,
                                       StripeSubscription,
                                       StripeWebhookEvent,
                                       SubscriptionDeletedEvent,
                                       SubscriptionDetails,
                                       SubscriptionUpsertEvent,
                                       UnrecognizedEvent, decode_event)

logger = logging.getLogger(__name__)

STRIPE_STATUS_MAP = {
    "active": SubscriptionStatus.ACTIVE,
    "canceled": SubscriptionStatus.CANCELLED,
    "past_due": SubscriptionStatus.PAST_DUE,
    "paused": SubscriptionStatus.PAUSED,
}


def map_stripe_status(stripe_status: str) -> SubscriptionStatus:
    """Map a Stripe subscription status onto ours; unmapped values become UNKNOWN"""
    status = STRIPE_STATUS_MAP.get(stripe_status)
    if status is None:
        logger.warning(f"map_stripe_status: Unmapped Stripe status '{stripe_status}'")
        return SubscriptionStatus.UNKNOWN
    return status


def to_major_units(amount_minor: int) -> Decimal:
    """Stripe amounts are in minor units (cents, paise)"""
    return (Decimal(amount_minor) / Decimal(100)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _to_plain(stripe_object):
    to_dict = getattr(stripe_object, "to_dict", None)
    return to_dict() if callable(to_dict) else stripe_object


class StripePaymentService:
    """Stripe calls plus reconciliation of Stripe webhooks into local rows"""

    def __init__(
        self,
        uow: UnitOfWork,
        client: stripe.StripeClient,
        webhook_secret: Optional[str] = None,
        webhook_tolerance: Optional[int] = None,
    ):
        self.uow = uow
        self.client = client
        self.webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.stripe_webhook_secret
        )
        self.webhook_tolerance = (
            webhook_tolerance if webhook_tolerance is not None else settings.stripe_webhook_tolerance
        )
        self.logger = logging.getLogger(__name__)
        self._handlers = {
            CheckoutSessionCompletedEvent: self._handle_checkout_session_completed,
            SubscriptionUpsertEvent: self._handle_subscription_upserted,
            SubscriptionDeletedEvent: self._handle_subscription_deleted,
            InvoicePaidEvent: self._handle_invoice_paid,
            InvoicePaymentFailedEvent: self._handle_invoice_payment_failed,
            UnrecognizedEvent: self._handle_unrecognized,
        }

    # ------------------------------------------------------------------ #
    # Provider operations
    # ------------------------------------------------------------------ #

    def create_customer(self, user_id: str, email: str, name: str) -> str:
        self.logger.info(f"create_customer: Entry - user: {user_id}")

        try:
            customer = self.client.customers.create(params={
                "email": email,
                "name": name,
                "metadata": {"userId": user_id},
            })
        except stripe.StripeError as e:
            self.logger.error(f"create_customer: Failure - user: {user_id} - {e}")
            raise

        self.logger.info(f"create_customer: Success - customer: {customer.id}, user: {user_id}")
        return customer.id

    def create_subscription_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
    ) -> str:
        self.logger.info(f"create_subscription_checkout_session: Entry - customer: {customer_id}")

        try:
            session = self.client.checkout.sessions.create(params={
                "customer": customer_id,
                "payment_method_types": ["card"],
                "line_items": [{"price": price_id, "quantity": 1}],
                "mode": "subscription",
                "success_url": success_url,
                "cancel_url": cancel_url,
            })
        except stripe.StripeError as e:
            self.logger.error(
                f"create_subscription_checkout_session: Failure - customer: {customer_id} - {e}")
            raise

        self.logger.info(
            f"create_subscription_checkout_session: Success - session: {session.id}, customer: {customer_id}")
        return session.url

    def cancel_subscription(self, subscription_id: str) -> bool:
        self.logger.info(f"cancel_subscription: Entry - subscription: {subscription_id}")

        try:
            subscription = self.client.subscriptions.cancel(subscription_id)
        except stripe.StripeError as e:
            self.logger.error(f"cancel_subscription: Failure - subscription: {subscription_id} - {e}")
            raise

        self.logger.info(f"cancel_subscription: Success - subscription: {subscription_id}")
        return subscription.status == "canceled"

    def get_subscription_details(self, subscription_id: str) -> Optional[SubscriptionDetails]:
        """Fetch a subscription from Stripe; None when Stripe cannot return it"""
        self.logger.info(f"get_subscription_details: Entry - subscription: {subscription_id}")

        try:
            subscription = self.client.subscriptions.retrieve(subscription_id)
        except stripe.StripeError as e:
            self.logger.error(f"get_subscription_details: Failure - subscription: {subscription_id} - {e}")
            return None

        parsed = StripeSubscription.model_validate(_to_plain(subscription))
        return SubscriptionDetails.from_subscription(parsed)

    # ------------------------------------------------------------------ #
    # Account flows
    # ------------------------------------------------------------------ #

    def ensure_customer(self, user: User) -> str:
        """Return the user's Stripe customer id, creating the customer on first use"""
        if user.stripe_customer_id:
            return user.stripe_customer_id

        user.stripe_customer_id = self.create_customer(user.id, user.email, user.full_name)
        self.uow.save_changes()
        return user.stripe_customer_id

    def start_checkout(
        self,
        user_id: str,
        plan_id: int,
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> str:
        self.logger.info(f"start_checkout: Entry - user: {user_id}, plan: {plan_id}")

        user = self.uow.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")

        plan: Optional[SubscriptionPlan] = self.uow.subscription_plans.get_by_id(plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan not found: {plan_id}")
        if not plan.is_active or not plan.stripe_price_id:
            raise PlanNotPurchasableError(f"Plan {plan.name} is not available for purchase")

        customer_id = self.ensure_customer(user)
        url = self.create_subscription_checkout_session(
            customer_id,
            plan.stripe_price_id,
            success_url or settings.checkout_success_url,
            cancel_url or settings.checkout_cancel_url,
        )
        self.logger.info(f"start_checkout: Success - user: {user_id}, plan: {plan_id}")
        return url

    def cancel_user_subscription(self, user_id: str) -> UserSubscription:
        self.logger.info(f"cancel_user_subscription: Entry - user: {user_id}")

        subscription = self.uow.user_subscriptions.get_active_subscription_by_user_id(user_id)
        if subscription is None:
            raise NoActiveSubscriptionError("No active subscription found")

        if subscription.stripe_subscription_id:
            self.cancel_subscription(subscription.stripe_subscription_id)

        now = datetime.utcnow()
        subscription.status = SubscriptionStatus.CANCELLED
        subscription.cancelled_at = now
        subscription.updated_at = now
        self.uow.save_changes()

        self.logger.info(
            f"cancel_user_subscription: Success - user: {user_id}, subscription: {subscription.id}")
        return subscription

    # ------------------------------------------------------------------ #
    # Webhook reconciliation
    # ------------------------------------------------------------------ #

    def process_webhook_event(self, payload: Union[bytes, str], signature: Optional[str]) -> StripeWebhookEvent:
        """Verify, decode and apply a Stripe webhook delivery.

        Raises stripe.SignatureVerificationError before touching the database
        when the payload cannot be verified, and ValueError when it is not a
        well-formed event.
        """
        self.logger.info("process_webhook_event: Entry")

        payload_text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        if not signature or not self.webhook_secret:
            self.logger.error("process_webhook_event: Failure - missing signature or webhook secret")
            raise stripe.SignatureVerificationError(
                "Unable to verify webhook payload", signature, payload_text)

        try:
            stripe.WebhookSignature.verify_header(
                payload_text,
                signature,
                self.webhook_secret,
                tolerance=self.webhook_tolerance,
            )
        except stripe.SignatureVerificationError as e:
            self.logger.error(f"process_webhook_event: Failure - invalid signature - {e}")
            raise

        raw_event = json.loads(payload_text)
        if not isinstance(raw_event, dict):
            raise ValueError("Webhook payload is not a JSON object")
        event = decode_event(raw_event)
        self.logger.info(f"process_webhook_event: Processing - type: {event.type}, event: {event.id}")

        handler = self._handlers[type(event)]
        handler(event)

        self.logger.info(f"process_webhook_event: Success - type: {event.type}, event: {event.id}")
        return event

    def _handle_checkout_session_completed(self, event: CheckoutSessionCompletedEvent):
        # The follow-up customer.subscription.* event carries the state we persist
        self.logger.info(f"Checkout session completed: {event.session.id}")

    def _handle_subscription_upserted(self, event: SubscriptionUpsertEvent):
        stripe_subscription = event.subscription

        existing = self.uow.user_subscriptions.get_by_stripe_subscription_id(stripe_subscription.id)
        if existing is not None:
            self._apply_subscription_update(existing, stripe_subscription)
            self.uow.save_changes()
            self.logger.info(f"Updated subscription {stripe_subscription.id}")
            return

        user = self.uow.users.get_by_stripe_customer_id(stripe_subscription.customer)
        if user is None:
            self.logger.info(
                f"Ignoring subscription {stripe_subscription.id}: no user for customer {stripe_subscription.customer}")
            return

        plan = self.uow.subscription_plans.get_by_stripe_price_id(stripe_subscription.price_id)
        if plan is None:
            # Prices get replaced in the dashboard; the product stays put
            plan = self.uow.subscription_plans.get_by_stripe_product_id(stripe_subscription.product_id)
        if plan is None:
            self.logger.info(
                f"Ignoring subscription {stripe_subscription.id}: no plan for price {stripe_subscription.price_id}")
            return

        self._insert_subscription(user, plan, stripe_subscription)

    def _insert_subscription(self, user: User, plan: SubscriptionPlan, stripe_subscription: StripeSubscription):
        start_date = stripe_subscription.period_start or datetime.utcnow()
        end_date = stripe_subscription.period_end or start_date + timedelta(days=plan.duration_in_days)
        new_subscription = UserSubscription(
            user_id=user.id,
            plan_id=plan.id,
            stripe_subscription_id=stripe_subscription.id,
            stripe_customer_id=stripe_subscription.customer,
            start_date=start_date,
            end_date=end_date,
            status=map_stripe_status(stripe_subscription.status),
        )

        try:
            with self.uow.savepoint():
                self.uow.user_subscriptions.add(new_subscription)
                self.uow.flush()
        except IntegrityError:
            # A concurrent delivery inserted the same Stripe subscription first
            existing = self.uow.user_subscriptions.get_by_stripe_subscription_id(stripe_subscription.id)
            if existing is None:
                raise
            self.logger.warning(
                f"Subscription {stripe_subscription.id} was inserted concurrently, updating instead")
            self._apply_subscription_update(existing, stripe_subscription)
            self.uow.save_changes()
            return

        self.uow.save_changes()
        self.logger.info(f"Created new subscription for user {user.id}")

    def _apply_subscription_update(self, subscription: UserSubscription, stripe_subscription: StripeSubscription):
        if stripe_subscription.period_start is not None:
            subscription.start_date = stripe_subscription.period_start
        if stripe_subscription.period_end is not None:
            subscription.end_date = stripe_subscription.period_end
        subscription.status = map_stripe_status(stripe_subscription.status)
        subscription.updated_at = datetime.utcnow()

    def _handle_subscription_deleted(self, event: SubscriptionDeletedEvent):
        subscription = self.uow.user_subscriptions.get_by_stripe_subscription_id(event.subscription.id)
        if subscription is None:
            self.logger.info(f"Ignoring deletion of unknown subscription {event.subscription.id}")
            return

        now = datetime.utcnow()
        subscription.status = SubscriptionStatus.CANCELLED
        subscription.cancelled_at = now
        subscription.updated_at = now
        self.uow.save_changes()
        self.logger.info(f"Cancelled subscription {event.subscription.id}")

    def _handle_invoice_paid(self, event: InvoicePaidEvent):
        invoice = event.invoice

        user = self.uow.users.get_by_stripe_customer_id(invoice.customer)
        if user is None:
            self.logger.info(f"Dropping invoice {invoice.id}: no user for customer {invoice.customer}")
            return

        if self.uow.payment_transactions.get_by_stripe_invoice_id(invoice.id) is not None:
            self.logger.info(f"Invoice {invoice.id} already recorded")
            return

        subscription = self.uow.user_subscriptions.get_by_stripe_subscription_id(invoice.subscription_id)
        transaction = PaymentTransaction(
            user_id=user.id,
            subscription_id=subscription.id if subscription else None,
            amount=to_major_units(invoice.amount_paid),
            currency=invoice.currency.upper(),
            status=PaymentStatus.SUCCEEDED,
            type=PaymentType.SUBSCRIPTION_PAYMENT,
            stripe_invoice_id=invoice.id,
            stripe_payment_intent_id=invoice.payment_intent,
            completed_at=datetime.utcnow(),
        )
        self.uow.payment_transactions.add(transaction)
        self.uow.save_changes()
        self.logger.info(f"Recorded payment for invoice {invoice.id}")

    def _handle_invoice_payment_failed(self, event: InvoicePaymentFailedEvent):
        subscription_id = event.invoice.subscription_id
        subscription = self.uow.user_subscriptions.get_by_stripe_subscription_id(subscription_id)
        if subscription is None:
            self.logger.info(f"Ignoring failed payment for unknown subscription {subscription_id}")
            return

        subscription.status = SubscriptionStatus.PAST_DUE
        subscription.updated_at = datetime.utcnow()
        self.uow.save_changes()
        self.logger.warning(f"Payment failed for subscription {subscription_id}")

    def _handle_unrecognized(self, event: UnrecognizedEvent):
        self.logger.info(f"Unhandled event type: {event.type}")
