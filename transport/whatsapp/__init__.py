"""WhatsApp Transport Layer - Module Exports"""

from .normalize import (
    NormalizationError,
    extract_sender_id,
    normalize_message,
)
from .schemas import DeliveryReceipt, InboundMessage
from .security import compute_signature, is_valid_signature, verify_signature
from .sender import (
    DryRunWhatsAppSender,
    TwilioWhatsAppSender,
    WhatsAppSender,
    format_whatsapp_number,
)
from .webhook import router

__all__ = [
    # Schemas
    "InboundMessage",
    "DeliveryReceipt",
    # Normalization
    "normalize_message",
    "extract_sender_id",
    "NormalizationError",
    # Security
    "compute_signature",
    "is_valid_signature",
    "verify_signature",
    # Sender
    "WhatsAppSender",
    "TwilioWhatsAppSender",
    "DryRunWhatsAppSender",
    "format_whatsapp_number",
    # Router
    "router",
]
