"""
Tests for the Stripe webhook route handler in isolation
"""

import pytest
import stripe
from unittest.mock import AsyncMock, MagicMock
from fastapi import HTTPException

from app.notifier.webhook_handler import handle_stripe_webhook
from app.schemas.stripe_events import UnrecognizedEvent


@pytest.fixture
def mock_request():
    """Create a mock request carrying a raw body"""
    request = MagicMock()
    request.body = AsyncMock(return_value=b'{"id": "evt_1", "type": "ping"}')
    return request


@pytest.fixture
def mock_payment_service():
    return MagicMock()


class TestStripeWebhookHandler:
    """Test how the route maps service outcomes to responses"""

    @pytest.mark.asyncio
    async def test_processed_event_acknowledged(self, mock_request, mock_payment_service):
        """Test that a processed delivery returns received: true"""
        mock_payment_service.process_webhook_event.return_value = UnrecognizedEvent(id="evt_1", type="ping")

        result = await handle_stripe_webhook(mock_request, "t=1,v1=abc", mock_payment_service)

        assert result == {"received": True}
        mock_payment_service.process_webhook_event.assert_called_once_with(
            b'{"id": "evt_1", "type": "ping"}', "t=1,v1=abc")

    @pytest.mark.asyncio
    async def test_bad_signature_is_400(self, mock_request, mock_payment_service):
        """Test that signature failures become a 400"""
        mock_payment_service.process_webhook_event.side_effect = stripe.SignatureVerificationError(
            "No signatures found", "t=1,v1=abc")

        with pytest.raises(HTTPException) as exc_info:
            await handle_stripe_webhook(mock_request, "t=1,v1=abc", mock_payment_service)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid signature"

    @pytest.mark.asyncio
    async def test_malformed_payload_is_400(self, mock_request, mock_payment_service):
        """Test that undecodable payloads become a 400"""
        mock_payment_service.process_webhook_event.side_effect = ValueError("Expecting value")

        with pytest.raises(HTTPException) as exc_info:
            await handle_stripe_webhook(mock_request, "t=1,v1=abc", mock_payment_service)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, mock_request, mock_payment_service):
        """Test that other failures reach the global error handler"""
        mock_payment_service.process_webhook_event.side_effect = RuntimeError("database is locked")

        with pytest.raises(RuntimeError):
            await handle_stripe_webhook(mock_request, "t=1,v1=abc", mock_payment_service)
