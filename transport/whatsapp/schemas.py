"""
WhatsApp Transport Layer - Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between the Twilio gateway and the orchestrator.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# INBOUND MESSAGE (THE CONTRACT)
# ============================================================================

class InboundMessage(BaseModel):
    """
    Canonical inbound message the orchestrator consumes.

    One per webhook delivery. Immutable.
    """

    model_config = ConfigDict(frozen=True)

    sender_id: str = Field(..., description="Gateway sender, e.g. 'whatsapp:+15551234567'")
    body: Optional[str] = Field(None, description="Text body, absent for media-only messages")
    num_media: int = Field(0, ge=0, description="Number of attached media items")
    media_url: Optional[str] = Field(None, description="URL of the first attachment")
    media_content_type: Optional[str] = Field(None, description="MIME type of the first attachment")
    message_id: str = Field("", description="Gateway message SID")

    @property
    def has_media(self) -> bool:
        return self.num_media > 0


# ============================================================================
# TWILIO API RESPONSE (OUTPUT)
# ============================================================================

@dataclass(frozen=True)
class DeliveryReceipt:
    """
    Result of one accepted outbound send.

    sid is None for dry-run sends.
    """

    sid: Optional[str]
    status: str
    to: str
    created_at_utc: datetime

    @staticmethod
    def now(sid: Optional[str], status: str, to: str) -> "DeliveryReceipt":
        return DeliveryReceipt(
            sid=sid,
            status=status,
            to=to,
            created_at_utc=datetime.now(timezone.utc),
        )
