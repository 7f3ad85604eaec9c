"""
Stub TTS backend for testing and offline development.

Deterministic, fast, and never fails silently.
"""

from errors import SynthesisError
from services.audio import AudioPayload

from .base import DEFAULT_LANGUAGE, TTSBackend


class StubTTSBackend(TTSBackend):
    """
    Deterministic fake TTS for testing and CI.

    Converts text to deterministic audio bytes.
    """

    async def synthesize(self, text: str, language_code: str = DEFAULT_LANGUAGE) -> AudioPayload:
        if not text:
            raise SynthesisError("Failed to synthesize speech: empty text")

        # 10 bytes per character
        audio_len = len(text) * 10
        return AudioPayload(data=bytes(i % 256 for i in range(audio_len)))
