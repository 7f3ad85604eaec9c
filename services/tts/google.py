"""
Google Cloud Text-to-Speech backend (REST, v1).
"""

import base64
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from errors import SynthesisError
from services.audio import AUDIO_ENCODING, AudioPayload
from services.google_auth import TokenProvider

from .base import (
    DEFAULT_LANGUAGE,
    PITCH,
    SPEAKING_RATE,
    TTSBackend,
    get_voice_profile,
)

logger = logging.getLogger(__name__)

TEXT_SYNTHESIZE_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"


class GoogleTTSBackend(TTSBackend):
    """
    Google Text-to-Speech over HTTPS with an OAuth bearer token.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        scratch_dir: str | Path = "temp",
        http_client: Optional[httpx.AsyncClient] = None,
        endpoint: str = TEXT_SYNTHESIZE_URL,
        timeout_s: float = 30.0,
    ):
        super().__init__(scratch_dir)
        self.token_provider = token_provider
        self.endpoint = endpoint
        self.timeout_s = timeout_s
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_s)

    def build_request(self, text: str, language_code: str) -> Dict[str, Any]:
        voice = get_voice_profile(language_code)
        return {
            "input": {"text": text},
            "voice": {
                "languageCode": voice.language_code,
                "name": voice.name,
                "ssmlGender": voice.ssml_gender,
            },
            "audioConfig": {
                "audioEncoding": AUDIO_ENCODING,
                "speakingRate": SPEAKING_RATE,
                "pitch": PITCH,
            },
        }

    async def synthesize(self, text: str, language_code: str = DEFAULT_LANGUAGE) -> AudioPayload:
        logger.info(
            "Starting text-to-speech synthesis",
            extra={"text_length": len(text), "language_code": language_code},
        )

        try:
            token = await self.token_provider.get_token()
            response = await self._http_client.post(
                self.endpoint,
                json=self.build_request(text, language_code),
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            audio_content = response.json().get("audioContent")
            if not audio_content:
                raise ValueError("response carried no audioContent")
            data = base64.b64decode(audio_content)
        except Exception as e:
            logger.error(
                f"Text-to-speech synthesis failed: {e}",
                extra={"language_code": language_code},
            )
            raise SynthesisError(f"Failed to synthesize speech: {e}") from e

        logger.info("Speech synthesis successful", extra={"audio_size": len(data)})
        return AudioPayload(data=data, content_type="audio/ogg")
