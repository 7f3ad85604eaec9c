"""
Speech-to-Text (STT) abstract interface.

Role: Audio → text plus detected language.

Rules:
- Pure transformation (no state mutation)
- No intent inference
- Failure → TranscriptionError (the orchestrator turns it into an apology)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from services.audio import AudioPayload

DEFAULT_LANGUAGE = "en-US"
ALTERNATIVE_LANGUAGE_CODES = ["es-ES", "en-US"]
SAMPLE_RATE_HERTZ = 16000

NO_SPEECH_MESSAGE = "Could not transcribe the audio. Please speak clearly and try again."


@dataclass
class Transcription:
    """Speech-to-Text result."""

    text: str
    language: str
    confidence: float = 0.0  # 0.0-1.0


class STTBackend(ABC):
    """
    Abstract STT boundary.
    Orchestration code must depend ONLY on this interface.
    """

    @abstractmethod
    async def transcribe(
        self,
        audio: AudioPayload,
        language_code: str = DEFAULT_LANGUAGE,
    ) -> Transcription:
        """
        Transcribe audio to text.

        Args:
            audio: Voice note payload
            language_code: Primary recognition language (BCP-47)

        Returns:
            Transcription with text, language and confidence

        Raises:
            TranscriptionError: no speech recognized or service unreachable
        """
        raise NotImplementedError
