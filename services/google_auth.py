"""
Google Cloud credentials for the REST adapters.

Speech-to-Text, Text-to-Speech and Dialogflow CX are called over HTTPS with
an OAuth bearer token. Credentials come from a service-account key file when
one is configured, otherwise from Application Default Credentials.
"""

import asyncio
import logging
from typing import Optional, Protocol

import google.auth
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


class TokenProvider(Protocol):
    """Anything that can hand out a bearer token."""

    async def get_token(self) -> str:
        ...


class GoogleCredentialsProvider:
    """
    Lazily loads Google credentials and refreshes the access token on demand.

    Loading and refreshing are blocking (google-auth uses requests), so both
    run in the default executor.
    """

    def __init__(self, credentials_path: Optional[str] = None):
        """
        Args:
            credentials_path: Path to a service-account JSON key. Falls back
                to Application Default Credentials when empty.
        """
        self.credentials_path = credentials_path or None
        self._credentials = None

    def _load(self):
        if self.credentials_path:
            logger.info(f"Loading service account credentials from {self.credentials_path}")
            return service_account.Credentials.from_service_account_file(
                self.credentials_path,
                scopes=[CLOUD_PLATFORM_SCOPE],
            )
        credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        return credentials

    def _refresh(self) -> str:
        if self._credentials is None:
            self._credentials = self._load()
        if not self._credentials.valid:
            self._credentials.refresh(GoogleAuthRequest())
        return self._credentials.token

    async def get_token(self) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._refresh)


class StaticTokenProvider:
    """Fixed token, for local emulators and tests."""

    def __init__(self, token: str):
        self.token = token

    async def get_token(self) -> str:
        return self.token
