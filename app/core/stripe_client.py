from functools import lru_cache

import stripe

from app.core.config import settings
import logging

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_stripe_client() -> stripe.StripeClient:
    """Process-wide Stripe client, built once from settings and injected where needed"""
    logger.info("get_stripe_client: Entry")

    if not settings.stripe_secret_key:
        logger.error("get_stripe_client: Failure - STRIPE_SECRET_KEY is not configured")
        raise RuntimeError("Stripe secret key is not configured")

    client = stripe.StripeClient(
        settings.stripe_secret_key,
        stripe_version=settings.stripe_api_version,
    )
    logger.info("get_stripe_client: Success")
    return client
