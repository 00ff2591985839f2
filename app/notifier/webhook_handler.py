import logging
from typing import Optional

import stripe
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from app.api.v1.routes.subscriptions import get_payment_service
from app.services.payment_service import StripePaymentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe")
async def handle_stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    payment_service: StripePaymentService = Depends(get_payment_service),
):
    """Handle Stripe webhook deliveries

    The raw body is verified against the Stripe-Signature header before
    anything is parsed. Stripe events handled:
    - checkout.session.completed
    - customer.subscription.created / updated / deleted
    - invoice.paid
    - invoice.payment_failed

    See: https://docs.stripe.com/webhooks
    """
    logger.info("handle_stripe_webhook: Entry")

    payload = await request.body()

    try:
        event = await run_in_threadpool(payment_service.process_webhook_event, payload, stripe_signature)
    except stripe.SignatureVerificationError:
        logger.warning("handle_stripe_webhook: Rejected - invalid signature")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature"
        )
    except ValueError as e:
        logger.warning(f"handle_stripe_webhook: Rejected - malformed payload - {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed event payload"
        )

    logger.info(f"handle_stripe_webhook: Success - type: {event.type}, event: {event.id}")
    return {"received": True}
