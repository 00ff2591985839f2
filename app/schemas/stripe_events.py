"""
Typed view of the Stripe webhook events we reconcile.

Each known event type decodes into its own model; anything else becomes an
UnrecognizedEvent. Only the fields we read are declared, everything else in
the payload is ignored.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _timestamp_to_datetime(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    # Stored as naive UTC like every other timestamp in the database
    return datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None)


def _expandable_id(value: Any) -> Any:
    """Stripe sends either an id or the expanded object for references"""
    if isinstance(value, dict):
        return value.get("id")
    return value


class StripeModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class StripePrice(StripeModel):
    id: Optional[str] = None
    product: Optional[str] = None

    @field_validator("product", mode="before")
    @classmethod
    def expand_reference(cls, value):
        return _expandable_id(value)


class StripeSubscriptionItem(StripeModel):
    price: Optional[StripePrice] = None
    # Newer API versions moved the billing period onto the item
    current_period_start: Optional[int] = None
    current_period_end: Optional[int] = None


class StripeSubscriptionItemList(StripeModel):
    data: List[StripeSubscriptionItem] = Field(default_factory=list)


class StripeSubscription(StripeModel):
    id: str
    customer: str
    status: str
    current_period_start: Optional[int] = None
    current_period_end: Optional[int] = None
    items: StripeSubscriptionItemList = Field(default_factory=StripeSubscriptionItemList)

    @field_validator("customer", mode="before")
    @classmethod
    def expand_reference(cls, value):
        return _expandable_id(value)

    @property
    def first_item(self) -> Optional[StripeSubscriptionItem]:
        return self.items.data[0] if self.items.data else None

    @property
    def price_id(self) -> Optional[str]:
        item = self.first_item
        return item.price.id if item and item.price else None

    @property
    def product_id(self) -> Optional[str]:
        item = self.first_item
        return item.price.product if item and item.price else None

    @property
    def period_start(self) -> Optional[datetime]:
        start = self.current_period_start
        if start is None and self.first_item:
            start = self.first_item.current_period_start
        return _timestamp_to_datetime(start)

    @property
    def period_end(self) -> Optional[datetime]:
        end = self.current_period_end
        if end is None and self.first_item:
            end = self.first_item.current_period_end
        return _timestamp_to_datetime(end)


class StripeInvoice(StripeModel):
    id: str
    customer: Optional[str] = None
    subscription: Optional[str] = None
    payment_intent: Optional[str] = None
    amount_paid: int = 0  # minor units
    currency: str = ""
    parent: Optional[Dict[str, Any]] = None

    @field_validator("customer", "subscription", "payment_intent", mode="before")
    @classmethod
    def expand_reference(cls, value):
        return _expandable_id(value)

    @property
    def subscription_id(self) -> Optional[str]:
        if self.subscription:
            return self.subscription
        # 2025-03-31+ API versions nest it under parent.subscription_details
        details = (self.parent or {}).get("subscription_details") or {}
        return _expandable_id(details.get("subscription"))


class StripeCheckoutSession(StripeModel):
    id: str
    customer: Optional[str] = None
    subscription: Optional[str] = None
    url: Optional[str] = None

    @field_validator("customer", "subscription", mode="before")
    @classmethod
    def expand_reference(cls, value):
        return _expandable_id(value)


class WebhookEvent(StripeModel):
    id: str = ""
    type: str


class CheckoutSessionCompletedEvent(WebhookEvent):
    session: StripeCheckoutSession


class SubscriptionUpsertEvent(WebhookEvent):
    """customer.subscription.created and customer.subscription.updated"""

    subscription: StripeSubscription


class SubscriptionDeletedEvent(WebhookEvent):
    subscription: StripeSubscription


class InvoicePaidEvent(WebhookEvent):
    invoice: StripeInvoice


class InvoicePaymentFailedEvent(WebhookEvent):
    invoice: StripeInvoice


class UnrecognizedEvent(WebhookEvent):
    pass


StripeWebhookEvent = Union[
    CheckoutSessionCompletedEvent,
    SubscriptionUpsertEvent,
    SubscriptionDeletedEvent,
    InvoicePaidEvent,
    InvoicePaymentFailedEvent,
    UnrecognizedEvent,
]

# event type -> (event model, field receiving data.object)
EVENT_DECODERS = {
    "checkout.session.completed": (CheckoutSessionCompletedEvent, "session"),
    "customer.subscription.created": (SubscriptionUpsertEvent, "subscription"),
    "customer.subscription.updated": (SubscriptionUpsertEvent, "subscription"),
    "customer.subscription.deleted": (SubscriptionDeletedEvent, "subscription"),
    "invoice.paid": (InvoicePaidEvent, "invoice"),
    "invoice.payment_failed": (InvoicePaymentFailedEvent, "invoice"),
}


def decode_event(payload: Dict[str, Any]) -> StripeWebhookEvent:
    """Decode a raw event dict into its typed variant.

    Raises pydantic.ValidationError when a known event type carries an object
    that does not match the expected shape.
    """
    event_type = payload.get("type") or ""
    event_id = payload.get("id") or ""
    decoder = EVENT_DECODERS.get(event_type)
    if decoder is None:
        return UnrecognizedEvent(id=event_id, type=event_type)

    event_cls, field_name = decoder
    data_object = (payload.get("data") or {}).get("object") or {}
    return event_cls.model_validate(
        {"id": event_id, "type": event_type, field_name: data_object}
    )


class SubscriptionDetails(StripeModel):
    """Provider-side snapshot of a subscription"""

    subscription_id: str
    customer_id: str
    status: str
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    price_id: str = ""

    @classmethod
    def from_subscription(cls, subscription: StripeSubscription) -> "SubscriptionDetails":
        return cls(
            subscription_id=subscription.id,
            customer_id=subscription.customer,
            status=subscription.status,
            current_period_start=subscription.period_start,
            current_period_end=subscription.period_end,
            price_id=subscription.price_id or "",
        )
