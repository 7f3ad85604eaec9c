"""
Text-to-Speech (TTS) abstract interface.

Role: Text → audio rendering only.

Rules:
- Output-only (no state mutation)
- Failure → SynthesisError
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from services.audio import AUDIO_EXTENSION, AudioPayload, discard_file, scratch_file, write_bytes

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en-US"
SPEAKING_RATE = 1.0
PITCH = 0.0


@dataclass(frozen=True)
class VoiceProfile:
    """Voice selection for one language."""

    language_code: str
    name: str
    ssml_gender: str = "FEMALE"


VOICE_PROFILES: Dict[str, VoiceProfile] = {
    "en-US": VoiceProfile("en-US", "en-US-Neural2-F"),
    "es-ES": VoiceProfile("es-ES", "es-ES-Neural2-A"),
    "es-US": VoiceProfile("es-US", "es-US-Neural2-A"),
}


def get_voice_profile(language_code: str) -> VoiceProfile:
    """Voice for a language, falling back to en-US."""
    return VOICE_PROFILES.get(language_code, VOICE_PROFILES[DEFAULT_LANGUAGE])


class TTSBackend(ABC):
    """
    Abstract TTS boundary.
    Orchestration code must depend ONLY on this interface.
    """

    def __init__(self, scratch_dir: str | Path = "temp"):
        self.scratch_dir = Path(scratch_dir)

    @abstractmethod
    async def synthesize(self, text: str, language_code: str = DEFAULT_LANGUAGE) -> AudioPayload:
        """
        Synthesize text to audio.

        Args:
            text: Text to speak
            language_code: Voice language (see VOICE_PROFILES)

        Returns:
            AudioPayload with OGG_OPUS audio

        Raises:
            SynthesisError: service failure
        """
        raise NotImplementedError

    async def synthesize_to_file(self, text: str, language_code: str, filename: str) -> Path:
        """
        Synthesize and write <scratch_dir>/<filename>.ogg.

        Returns:
            Path of the written file

        Raises:
            ValidationError: filename is not a bare file name
        """
        path = scratch_file(self.scratch_dir, f"{filename}{AUDIO_EXTENSION}")
        payload = await self.synthesize(text, language_code)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, write_bytes, path, payload.data)
        payload.path = path

        logger.info(
            "Audio saved to file",
            extra={"path": str(path), "size": len(payload.data)},
        )
        return path

    async def cleanup(self, path: Path) -> None:
        """Delete a synthesized file. Failures are logged, never raised."""
        await discard_file(path)
