"""
Language-detecting transcription.

Transcribes with the default language first and retries with the alternate
language only when the first pass is not confident enough.
"""

import logging

from services.audio import AudioPayload

from .base import STTBackend, Transcription

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.7


class LanguageDetectingTranscriber:
    """Two-pass transcription over any STTBackend."""

    def __init__(
        self,
        backend: STTBackend,
        default_language: str = "en-US",
        alternate_language: str = "es-ES",
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ):
        self.backend = backend
        self.default_language = default_language
        self.alternate_language = alternate_language
        self.confidence_threshold = confidence_threshold

    async def transcribe_with_detection(self, audio: AudioPayload) -> Transcription:
        """
        Returns the alternate-language result only when it is strictly more
        confident than the default-language one.
        """
        result = await self.backend.transcribe(audio, self.default_language)

        if result.confidence >= self.confidence_threshold:
            return result

        logger.info(
            "Low confidence, retrying with alternate language",
            extra={
                "confidence": result.confidence,
                "alternate_language": self.alternate_language,
            },
        )
        alternate = await self.backend.transcribe(audio, self.alternate_language)

        if alternate.confidence > result.confidence:
            return alternate
        return result
