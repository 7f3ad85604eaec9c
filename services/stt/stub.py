"""
Stub STT backend for testing and offline development.

Deterministic, fast, and never fails silently.
"""

from errors import TranscriptionError
from services.audio import AudioPayload

from .base import DEFAULT_LANGUAGE, NO_SPEECH_MESSAGE, STTBackend, Transcription


class StubSTTBackend(STTBackend):
    """
    Deterministic fake STT for testing and CI.

    Returns a fixed transcript for any non-empty audio.
    """

    def __init__(self, text: str = "This is a stubbed transcription.", confidence: float = 0.99):
        self.text = text
        self.confidence = confidence

    async def transcribe(
        self,
        audio: AudioPayload,
        language_code: str = DEFAULT_LANGUAGE,
    ) -> Transcription:
        if not audio.data:
            raise TranscriptionError(NO_SPEECH_MESSAGE)

        return Transcription(
            text=self.text,
            language=language_code,
            confidence=self.confidence,
        )
