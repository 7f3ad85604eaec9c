"""
WhatsApp Input Normalization

PURE CONVERSION - NO LOGIC, NO SERVICE CALLS

Converts Twilio webhook fields (form-encoded or JSON) into InboundMessage.
- TEXT: Body preserved as sent
- VOICE: First media URL and content type preserved, no download
"""

import re
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .schemas import InboundMessage

# Twilio SIDs are two letters followed by hex; the id also names scratch files
MESSAGE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


class NormalizationError(Exception):
    """Input normalization failed."""
    pass


def normalize_message(fields: Mapping[str, Any]) -> InboundMessage:
    """
    Convert Twilio webhook fields into InboundMessage.

    Args:
        fields: Form or JSON fields (From, Body, NumMedia, MediaUrl0,
            MediaContentType0, MessageSid)

    Returns:
        InboundMessage ready for the dispatcher

    Raises:
        NormalizationError: Missing sender, malformed NumMedia or unsafe MessageSid
    """
    sender_id = _str_or_none(fields.get("From"))
    if not sender_id:
        raise NormalizationError("Payload missing 'From'")

    raw_num_media = fields.get("NumMedia") or 0
    try:
        num_media = int(raw_num_media)
    except (TypeError, ValueError) as e:
        raise NormalizationError(f"Invalid NumMedia: {raw_num_media!r}") from e

    message_id = _str_or_none(fields.get("MessageSid")) or ""
    if not MESSAGE_ID_PATTERN.fullmatch(message_id):
        raise NormalizationError(f"Invalid MessageSid: {message_id!r}")

    try:
        return InboundMessage(
            sender_id=sender_id,
            body=_str_or_none(fields.get("Body")),
            num_media=num_media,
            media_url=_str_or_none(fields.get("MediaUrl0")),
            media_content_type=_str_or_none(fields.get("MediaContentType0")),
            message_id=message_id,
        )
    except PydanticValidationError as e:
        raise NormalizationError(f"Invalid payload: {e}") from e


def _str_or_none(value: Any):
    if value is None:
        return None
    return str(value)


def extract_sender_id(fields: Mapping[str, Any]) -> str:
    """
    Extract sender from payload.

    Useful for routing/logging without full normalization.
    """
    sender_id = fields.get("From")
    if not sender_id:
        raise NormalizationError("Cannot extract sender_id from payload")
    return str(sender_id)
