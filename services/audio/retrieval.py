"""
Voice Attachment Retrieval

Downloads WhatsApp voice notes from Twilio media URLs (HTTP Basic auth with
the account SID and auth token), bounds their size and keeps a copy in the
scratch directory named after the inbound message id.

WhatsApp voice notes are Opus in an Ogg container.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import httpx

from errors import AudioFetchError, AudioTooLargeError, ValidationError

logger = logging.getLogger(__name__)

AUDIO_ENCODING = "OGG_OPUS"
AUDIO_EXTENSION = ".ogg"
DEFAULT_MAX_AUDIO_SIZE = 16 * 1024 * 1024  # matches the gateway attachment limit

# Credentials are only ever sent to these hosts. Twilio answers with a
# redirect to its CDN, and httpx drops Authorization on cross-origin redirects.
TWILIO_MEDIA_HOSTS = ("api.twilio.com",)


@dataclass
class AudioPayload:
    """Raw audio bytes plus where (if anywhere) they were persisted."""

    data: bytes
    encoding: str = AUDIO_ENCODING
    content_type: Optional[str] = "audio/ogg"
    path: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.data)


def scratch_file(scratch_dir: Path, filename: str) -> Path:
    """
    Path of filename inside scratch_dir.

    Raises:
        ValidationError: filename is empty or is not a bare file name
    """
    if not filename or filename in (".", "..") or Path(filename).name != filename or "\\" in filename:
        raise ValidationError(f"Invalid scratch file name: {filename!r}")
    return scratch_dir / filename


async def discard_file(path: Path) -> None:
    """Delete a file. Failures are logged, never raised."""
    try:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, path.unlink)
        logger.info("Temp file cleaned up", extra={"path": str(path)})
    except OSError as e:
        logger.warning(
            f"Failed to cleanup temp file: {e}",
            extra={"path": str(path)},
        )


class AudioRetriever:
    """
    Fetches, validates and cleans up voice attachments.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        scratch_dir: str | Path,
        max_audio_size: int = DEFAULT_MAX_AUDIO_SIZE,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = 30.0,
        media_hosts: Iterable[str] = TWILIO_MEDIA_HOSTS,
    ):
        """
        Args:
            account_sid: Twilio account SID (Basic auth username)
            auth_token: Twilio auth token (Basic auth password)
            scratch_dir: Directory for transient audio files
            max_audio_size: Size ceiling in bytes
            http_client: Shared AsyncClient (one is created if omitted)
            timeout_s: Per-request timeout
            media_hosts: Hosts trusted with the gateway credentials
        """
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.scratch_dir = Path(scratch_dir)
        self.max_audio_size = max_audio_size
        self.timeout_s = timeout_s
        self.media_hosts = frozenset(host.lower() for host in media_hosts)
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_s)

    def scratch_path(self, filename: str) -> Path:
        return scratch_file(self.scratch_dir, filename)

    def _check_media_url(self, media_url: str) -> None:
        try:
            url = httpx.URL(media_url)
        except httpx.InvalidURL as e:
            raise AudioFetchError("Failed to download audio: invalid media URL") from e

        if url.scheme != "https" or url.host.lower() not in self.media_hosts:
            logger.warning(
                "Refusing media download from untrusted host",
                extra={"media_url": media_url},
            )
            raise AudioFetchError("Failed to download audio: untrusted media host")

    async def fetch(self, media_url: str, correlation_id: str) -> AudioPayload:
        """
        Download a voice attachment and persist it as <correlation_id>.ogg.

        Raises:
            AudioFetchError: untrusted host, network failure, non-2xx or
                rejected credentials
            ValidationError: correlation_id is not usable as a file name
        """
        path = self.scratch_path(f"{correlation_id}{AUDIO_EXTENSION}")
        self._check_media_url(media_url)

        logger.info(
            "Downloading audio file",
            extra={"media_url": media_url, "message_id": correlation_id},
        )

        try:
            response = await self._http_client.get(
                media_url,
                auth=(self.account_sid, self.auth_token),
                follow_redirects=True,
                timeout=self.timeout_s,
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to download audio: {e}",
                extra={"media_url": media_url, "error": str(e)},
            )
            raise AudioFetchError(f"Failed to download audio: {e}") from e

        if response.status_code in (401, 403):
            logger.error(
                f"Gateway rejected media credentials: {response.status_code}",
                extra={"media_url": media_url},
            )
            raise AudioFetchError(
                f"Failed to download audio: authentication rejected ({response.status_code})"
            )

        if not response.is_success:
            logger.error(
                f"Media download returned {response.status_code}",
                extra={"media_url": media_url, "status_code": response.status_code},
            )
            raise AudioFetchError(
                f"Failed to download audio: gateway returned {response.status_code}"
            )

        payload = AudioPayload(
            data=response.content,
            content_type=response.headers.get("content-type", "audio/ogg"),
        )
        logger.info(
            "Audio downloaded successfully",
            extra={"size": len(payload.data), "content_type": payload.content_type},
        )

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, write_bytes, path, payload.data)
        payload.path = path
        return payload

    def validate_size(self, payload: AudioPayload) -> None:
        """
        Raises:
            AudioTooLargeError: payload is larger than max_audio_size
        """
        size = len(payload.data)
        if size > self.max_audio_size:
            max_mb = self.max_audio_size / 1024 / 1024
            raise AudioTooLargeError(
                f"Audio file too large. Maximum size is {max_mb:g}MB"
            )

        logger.info(
            "Audio size validated",
            extra={"size": size, "max_size": self.max_audio_size},
        )

    async def process_voice_note(self, media_url: str, correlation_id: str) -> AudioPayload:
        """Download then validate a voice note."""
        try:
            payload = await self.fetch(media_url, correlation_id)
            self.validate_size(payload)
            return payload
        except Exception as e:
            logger.error(
                f"Voice note processing failed: {e}",
                extra={"message_id": correlation_id},
            )
            raise

    async def cleanup(self, filename: str) -> None:
        """Delete a scratch file. Failures are logged, never raised."""
        try:
            path = self.scratch_path(filename)
        except ValidationError as e:
            logger.warning(f"Skipping cleanup: {e.message}")
            return
        await discard_file(path)

    @staticmethod
    def audio_info(payload: AudioPayload) -> Dict[str, Any]:
        size = len(payload.data)
        return {
            "size": size,
            "size_in_mb": f"{size / 1024 / 1024:.2f}",
            "format": payload.encoding,
        }


def write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
