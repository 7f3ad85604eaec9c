"""
WhatsApp Sender Tests

Twilio Messages API contract, retry policy and dry-run sender.
"""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs

import httpx
import pytest

from errors import DeliveryError
from transport.whatsapp.schemas import DeliveryReceipt
from transport.whatsapp.sender import (
    DryRunWhatsAppSender,
    TwilioWhatsAppSender,
    format_whatsapp_number,
)


def _sender(handler, sleep=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TwilioWhatsAppSender(
        account_sid="AC123",
        auth_token="secret",
        from_number="whatsapp:+14155238886",
        http_client=client,
        sleep=sleep or AsyncMock(),
    )


class TestFormatNumber:

    def test_adds_prefix(self):
        assert format_whatsapp_number("+15551234567") == "whatsapp:+15551234567"

    def test_keeps_existing_prefix(self):
        assert format_whatsapp_number("whatsapp:+15551234567") == "whatsapp:+15551234567"


class TestTwilioSender:

    @pytest.mark.asyncio
    async def test_send_text_posts_form_fields(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers.get("authorization")
            captured["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM1", "status": "queued"})

        receipt = await _sender(handler).send_text("+15551234567", "Hola")

        assert captured["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
        assert captured["auth"].startswith("Basic ")
        assert captured["form"]["From"] == ["whatsapp:+14155238886"]
        assert captured["form"]["To"] == ["whatsapp:+15551234567"]
        assert captured["form"]["Body"] == ["Hola"]
        assert isinstance(receipt, DeliveryReceipt)
        assert receipt.sid == "SM1"
        assert receipt.status == "queued"
        assert receipt.to == "whatsapp:+15551234567"

    @pytest.mark.asyncio
    async def test_send_audio_uses_media_url(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "MM1", "status": "queued"})

        await _sender(handler).send_audio("whatsapp:+1", "https://cdn.example.com/a.ogg")

        assert captured["form"]["MediaUrl"] == ["https://cdn.example.com/a.ogg"]
        assert "Body" not in captured["form"]

    @pytest.mark.asyncio
    async def test_rejected_send_raises_delivery_error(self):
        sender = _sender(lambda request: httpx.Response(400, json={"message": "bad To"}))

        with pytest.raises(DeliveryError):
            await sender.send_text("+1", "hi")

    @pytest.mark.asyncio
    async def test_network_failure_raises_delivery_error(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(DeliveryError):
            await _sender(handler).send_text("+1", "hi")


class TestRetry:
    """send_text_with_retry sleeps attempt × 1s, no jitter."""

    @pytest.mark.asyncio
    async def test_succeeds_after_two_failures(self):
        calls = {"n": 0}

        def handler(request):
            calls["n"] += 1
            if calls["n"] < 3:
                return httpx.Response(500)
            return httpx.Response(201, json={"sid": "SM9", "status": "queued"})

        sleep = AsyncMock()
        receipt = await _sender(handler, sleep).send_text_with_retry("+1", "hi")

        assert receipt.sid == "SM9"
        assert calls["n"] == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_reraises_after_last_attempt(self):
        sleep = AsyncMock()
        sender = _sender(lambda request: httpx.Response(503), sleep)

        with pytest.raises(DeliveryError):
            await sender.send_text_with_retry("+1", "hi", max_attempts=3)

        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_single_attempt_never_sleeps(self):
        sleep = AsyncMock()
        sender = _sender(lambda request: httpx.Response(503), sleep)

        with pytest.raises(DeliveryError):
            await sender.send_text_with_retry("+1", "hi", max_attempts=1)

        sleep.assert_not_awaited()


class TestDryRunSender:

    @pytest.mark.asyncio
    async def test_records_and_never_sends(self):
        sender = DryRunWhatsAppSender()

        receipt = await sender.send_text("+15551234567", "Hello")

        assert receipt.sid is None
        assert receipt.status == "dry_run"
        assert sender.sent == [("whatsapp:+15551234567", "Hello")]
