"""
Google Cloud Speech-to-Text backend (REST, v1p1beta1).

The beta surface is used because it accepts alternativeLanguageCodes and
reports the detected languageCode per result.
"""

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from errors import TranscriptionError
from services.audio import AudioPayload
from services.google_auth import TokenProvider

from .base import (
    ALTERNATIVE_LANGUAGE_CODES,
    DEFAULT_LANGUAGE,
    NO_SPEECH_MESSAGE,
    SAMPLE_RATE_HERTZ,
    STTBackend,
    Transcription,
)

logger = logging.getLogger(__name__)

SPEECH_RECOGNIZE_URL = "https://speech.googleapis.com/v1p1beta1/speech:recognize"


class GoogleSpeechSTTBackend(STTBackend):
    """
    Google Speech-to-Text over HTTPS with an OAuth bearer token.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        http_client: Optional[httpx.AsyncClient] = None,
        endpoint: str = SPEECH_RECOGNIZE_URL,
        timeout_s: float = 30.0,
    ):
        self.token_provider = token_provider
        self.endpoint = endpoint
        self.timeout_s = timeout_s
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_s)

    def build_request(self, audio: AudioPayload, language_code: str) -> Dict[str, Any]:
        return {
            "config": {
                "encoding": audio.encoding,
                "sampleRateHertz": SAMPLE_RATE_HERTZ,
                "languageCode": language_code,
                "alternativeLanguageCodes": list(ALTERNATIVE_LANGUAGE_CODES),
                "enableAutomaticPunctuation": True,
                "model": "default",
            },
            "audio": {
                "content": base64.b64encode(audio.data).decode("ascii"),
            },
        }

    async def transcribe(
        self,
        audio: AudioPayload,
        language_code: str = DEFAULT_LANGUAGE,
    ) -> Transcription:
        logger.info(
            "Starting transcription",
            extra={"language_code": language_code, "audio_size": len(audio.data)},
        )

        try:
            token = await self.token_provider.get_token()
            response = await self._http_client.post(
                self.endpoint,
                json=self.build_request(audio, language_code),
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.error(
                f"Transcription failed: {e}",
                extra={"language_code": language_code},
            )
            raise TranscriptionError(f"Failed to transcribe audio: {e}") from e

        results = data.get("results") or []
        if not results:
            logger.warning("No transcription results")
            raise TranscriptionError(NO_SPEECH_MESSAGE)

        transcription = parse_results(results, language_code)
        logger.info(
            "Transcription successful",
            extra={
                "text_length": len(transcription.text),
                "language": transcription.language,
                "confidence": transcription.confidence,
            },
        )
        return transcription


def parse_results(results: list, requested_language: str) -> Transcription:
    """
    Collapse recognize results into one Transcription.

    Each result's top alternative contributes one line. Language and
    confidence come from the first result.
    """
    lines = []
    for result in results:
        alternatives = result.get("alternatives") or [{}]
        lines.append(alternatives[0].get("transcript", ""))

    first = results[0]
    first_alternative = (first.get("alternatives") or [{}])[0]

    return Transcription(
        text="\n".join(lines),
        language=first.get("languageCode") or requested_language,
        confidence=float(first_alternative.get("confidence") or 0.0),
    )
