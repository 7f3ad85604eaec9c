"""
WhatsApp Response Sender

Sends text (or media by URL) back to the user through the Twilio
Messages API. Retry lives in the base class so every sender shares it.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

import httpx

from errors import DeliveryError

from .schemas import DeliveryReceipt

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"
TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
RETRY_BASE_DELAY_S = 1.0


def format_whatsapp_number(number: str) -> str:
    """Add the 'whatsapp:' prefix when missing."""
    if number.startswith(WHATSAPP_PREFIX):
        return number
    return f"{WHATSAPP_PREFIX}{number}"


class WhatsAppSender(ABC):
    """
    Abstract outbound boundary.
    """

    def __init__(self, sleep: Optional[Callable[[float], Awaitable[None]]] = None):
        """
        Args:
            sleep: Awaitable sleep used between retries (asyncio.sleep by default)
        """
        self._sleep = sleep or asyncio.sleep

    @abstractmethod
    async def send_text(self, to: str, body: str) -> DeliveryReceipt:
        """
        Send a text message.

        Raises:
            DeliveryError: gateway rejected or was unreachable
        """
        raise NotImplementedError

    @abstractmethod
    async def send_audio(self, to: str, media_url: str) -> DeliveryReceipt:
        """Send a media message referencing a publicly reachable URL."""
        raise NotImplementedError

    async def send_text_with_retry(
        self,
        to: str,
        body: str,
        max_attempts: int = 3,
    ) -> DeliveryReceipt:
        """
        send_text with linear backoff: sleeps attempt × 1s between tries.

        Raises:
            The last attempt's error once attempts are exhausted
        """
        for attempt in range(1, max_attempts + 1):
            try:
                return await self.send_text(to, body)
            except Exception as e:
                logger.warning(
                    f"Message send attempt {attempt} failed",
                    extra={"to": to, "attempt": attempt, "error": str(e)},
                )
                if attempt == max_attempts:
                    raise
                await self._sleep(attempt * RETRY_BASE_DELAY_S)

        raise DeliveryError("max_attempts must be at least 1")


class TwilioWhatsAppSender(WhatsAppSender):
    """
    Twilio Messages REST API (form-encoded POST, HTTP Basic auth).
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = TWILIO_API_BASE,
        timeout_s: float = 30.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        super().__init__(sleep=sleep)
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.api_base = api_base
        self.timeout_s = timeout_s
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_s)

    @property
    def messages_url(self) -> str:
        return f"{self.api_base}/Accounts/{self.account_sid}/Messages.json"

    async def _create_message(self, to: str, fields: dict) -> DeliveryReceipt:
        to = format_whatsapp_number(to)
        data = {"From": format_whatsapp_number(self.from_number), "To": to, **fields}

        try:
            response = await self._http_client.post(
                self.messages_url,
                data=data,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout_s,
            )
        except httpx.HTTPError as e:
            logger.error(
                f"HTTP request failed: {e}",
                extra={"to": to, "error": str(e)},
            )
            raise DeliveryError(f"Failed to send message: {e}") from e

        if not response.is_success:
            error_text = response.text
            logger.error(
                f"Twilio API error: {response.status_code} - {error_text}",
                extra={"status_code": response.status_code, "error_body": error_text},
            )
            raise DeliveryError(f"Failed to send message: Twilio returned {response.status_code}")

        result = response.json()
        logger.info(
            "Message sent successfully",
            extra={"message_sid": result.get("sid"), "to": to},
        )
        return DeliveryReceipt.now(
            sid=result.get("sid"),
            status=result.get("status", "queued"),
            to=to,
        )

    async def send_text(self, to: str, body: str) -> DeliveryReceipt:
        logger.info("Sending text message", extra={"to": to, "body_length": len(body)})
        return await self._create_message(to, {"Body": body})

    async def send_audio(self, to: str, media_url: str) -> DeliveryReceipt:
        logger.info("Sending audio message", extra={"to": to, "media_url": media_url})
        return await self._create_message(to, {"MediaUrl": media_url})


class DryRunWhatsAppSender(WhatsAppSender):
    """
    Never sends anything. Logs the message and returns a dry-run receipt.
    """

    def __init__(self, sleep: Optional[Callable[[float], Awaitable[None]]] = None):
        super().__init__(sleep=sleep)
        self.sent: list[tuple[str, str]] = []

    async def send_text(self, to: str, body: str) -> DeliveryReceipt:
        to = format_whatsapp_number(to)
        self.sent.append((to, body))
        logger.info(f"DRY_RUN: text to {to} not sent", extra={"to": to, "body": body})
        return DeliveryReceipt.now(sid=None, status="dry_run", to=to)

    async def send_audio(self, to: str, media_url: str) -> DeliveryReceipt:
        to = format_whatsapp_number(to)
        self.sent.append((to, media_url))
        logger.info(f"DRY_RUN: audio to {to} not sent", extra={"to": to, "media_url": media_url})
        return DeliveryReceipt.now(sid=None, status="dry_run", to=to)
