"""
Google credentials provider tests.
"""

from unittest.mock import MagicMock, patch

import pytest

from services.google_auth import (
    CLOUD_PLATFORM_SCOPE,
    GoogleCredentialsProvider,
    StaticTokenProvider,
)


class TestGoogleCredentialsProvider:

    @pytest.mark.asyncio
    async def test_service_account_file_is_loaded_once(self):
        credentials = MagicMock()
        credentials.valid = False
        credentials.token = "fresh-token"

        with patch(
            "services.google_auth.service_account.Credentials.from_service_account_file",
            return_value=credentials,
        ) as from_file:
            provider = GoogleCredentialsProvider("/keys/sa.json")
            assert await provider.get_token() == "fresh-token"
            credentials.valid = True
            assert await provider.get_token() == "fresh-token"

        from_file.assert_called_once_with("/keys/sa.json", scopes=[CLOUD_PLATFORM_SCOPE])
        credentials.refresh.assert_called_once()

    @pytest.mark.asyncio
    async def test_application_default_credentials(self):
        credentials = MagicMock()
        credentials.valid = True
        credentials.token = "adc-token"

        with patch("services.google_auth.google.auth.default", return_value=(credentials, "proj")) as adc:
            token = await GoogleCredentialsProvider().get_token()

        assert token == "adc-token"
        adc.assert_called_once_with(scopes=[CLOUD_PLATFORM_SCOPE])
        credentials.refresh.assert_not_called()


@pytest.mark.asyncio
async def test_static_token_provider():
    assert await StaticTokenProvider("abc").get_token() == "abc"
