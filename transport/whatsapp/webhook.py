"""
WhatsApp Webhook Receiver

FastAPI router that receives Twilio WhatsApp deliveries and hands them to
the message dispatcher. The gateway is always acknowledged with 200 "OK"
before any processing happens.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from .normalize import NormalizationError, normalize_message
from .security import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WhatsApp Transport"])

ACK_TEXT = "OK"
ACTIVE_TEXT = "Whatstutor AI webhook is active"


async def _read_fields(request: Request) -> Dict[str, Any]:
    """Twilio posts form-encoded fields; JSON is accepted for local testing."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        body = await request.body()
        payload = json.loads(body) if body else {}
        if not isinstance(payload, dict):
            raise ValueError("JSON payload must be an object")
        return payload

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


# ============================================================================
# WEBHOOK STATUS
# ============================================================================

@router.get("", response_class=PlainTextResponse)
async def webhook_status() -> str:
    """Liveness probe for the gateway configuration screen."""
    return ACTIVE_TEXT


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("", response_class=PlainTextResponse)
async def whatsapp_webhook_receiver(request: Request) -> str:
    """
    Receive WhatsApp messages via webhook.

    Flow:
    1. Parse form (or JSON) fields
    2. Verify signature when enabled (403 if invalid)
    3. Normalize to InboundMessage
    4. Enqueue on the dispatcher

    Any parse or normalization failure is logged and still acknowledged so
    the gateway does not redeliver.
    """
    bootstrap = request.app.state.bootstrap

    try:
        fields = await _read_fields(request)
    except Exception as e:
        logger.error(f"Failed to read webhook payload: {e}", exc_info=True)
        return ACK_TEXT

    logger.info(
        "Received webhook",
        extra={
            "from": fields.get("From"),
            "num_media": fields.get("NumMedia"),
            "message_sid": fields.get("MessageSid"),
        },
    )

    settings = bootstrap.settings
    if settings.validate_signature:
        # raises HTTPException(403)
        verify_signature(
            request,
            fields,
            auth_token=settings.twilio_auth_token,
            public_url=settings.public_webhook_url or None,
        )

    try:
        message = normalize_message(fields)
    except NormalizationError as e:
        logger.warning(f"Dropping webhook delivery: {e}")
        return ACK_TEXT

    bootstrap.dispatcher.submit(message)
    return ACK_TEXT
