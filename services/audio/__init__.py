"""
Audio Services Module

Handles inbound voice attachments:
  - Authenticated download from the gateway
  - Size validation
  - Scratch-directory persistence and cleanup
"""

from .retrieval import (
    AUDIO_ENCODING,
    AUDIO_EXTENSION,
    TWILIO_MEDIA_HOSTS,
    AudioPayload,
    AudioRetriever,
    discard_file,
    scratch_file,
    write_bytes,
)

__all__ = [
    "AUDIO_ENCODING",
    "AUDIO_EXTENSION",
    "TWILIO_MEDIA_HOSTS",
    "AudioPayload",
    "AudioRetriever",
    "discard_file",
    "scratch_file",
    "write_bytes",
]
