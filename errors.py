"""
Error taxonomy.

Every error raised by an adapter is an AppError subclass. AppError messages
are operational: they are safe to show to the WhatsApp user. Anything else
that escapes an adapter is treated as internal and never shown verbatim.
"""

from typing import Optional


class AppError(Exception):
    """Base class for operational errors."""

    status_code = 500
    is_operational = True

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Malformed inbound message."""

    status_code = 400


class AudioProcessingError(AppError):
    """Audio retrieval, transcription or synthesis failed."""

    status_code = 422


class AudioFetchError(AudioProcessingError):
    """Voice attachment could not be downloaded."""


class AudioTooLargeError(AudioProcessingError):
    """Voice attachment exceeds the configured size ceiling."""


class TranscriptionError(AudioProcessingError):
    """Speech service returned nothing usable or was unreachable."""


class SynthesisError(AudioProcessingError):
    """Voice synthesis failed."""


class DeliveryError(AppError):
    """Outbound WhatsApp send failed."""

    status_code = 502


class IntentDetectionError(AppError):
    """Conversational agent unavailable."""

    status_code = 503
