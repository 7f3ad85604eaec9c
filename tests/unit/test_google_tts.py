"""
Text-to-Speech adapter tests.
"""

import base64
import json

import httpx
import pytest

from errors import SynthesisError, ValidationError
from services.google_auth import StaticTokenProvider
from services.tts import GoogleTTSBackend, StubTTSBackend, get_voice_profile


def _backend(handler, tmp_path):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleTTSBackend(StaticTokenProvider("tkn"), scratch_dir=tmp_path, http_client=client)


def _audio_response(data=b"ogg-bytes"):
    return httpx.Response(200, json={"audioContent": base64.b64encode(data).decode()})


class TestVoiceProfiles:

    @pytest.mark.parametrize(
        "language, name",
        [
            ("en-US", "en-US-Neural2-F"),
            ("es-ES", "es-ES-Neural2-A"),
            ("es-US", "es-US-Neural2-A"),
            ("de-DE", "en-US-Neural2-F"),
        ],
    )
    def test_lookup(self, language, name):
        profile = get_voice_profile(language)
        assert profile.name == name
        assert profile.ssml_gender == "FEMALE"


class TestGoogleTTSBackend:

    @pytest.mark.asyncio
    async def test_request_contract(self, tmp_path):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return _audio_response()

        payload = await _backend(handler, tmp_path).synthesize("Hola", "es-ES")

        assert captured["url"] == "https://texttospeech.googleapis.com/v1/text:synthesize"
        assert captured["body"] == {
            "input": {"text": "Hola"},
            "voice": {"languageCode": "es-ES", "name": "es-ES-Neural2-A", "ssmlGender": "FEMALE"},
            "audioConfig": {"audioEncoding": "OGG_OPUS", "speakingRate": 1.0, "pitch": 0.0},
        }
        assert payload.data == b"ogg-bytes"

    @pytest.mark.asyncio
    async def test_unknown_language_uses_english_voice(self, tmp_path):
        captured = {}

        def handler(request):
            captured["voice"] = json.loads(request.content)["voice"]
            return _audio_response()

        await _backend(handler, tmp_path).synthesize("Hallo", "de-DE")

        assert captured["voice"]["name"] == "en-US-Neural2-F"
        assert captured["voice"]["languageCode"] == "en-US"

    @pytest.mark.asyncio
    async def test_synthesize_to_file(self, tmp_path):
        backend = _backend(lambda r: _audio_response(b"voice"), tmp_path)

        path = await backend.synthesize_to_file("Hi", "en-US", "response_MM1")

        assert path == tmp_path / "response_MM1.ogg"
        assert path.read_bytes() == b"voice"

    @pytest.mark.asyncio
    async def test_synthesize_to_file_rejects_path_like_names(self, tmp_path):
        scratch_dir = tmp_path / "temp"
        backend = _backend(lambda r: _audio_response(b"voice"), scratch_dir)

        with pytest.raises(ValidationError):
            await backend.synthesize_to_file("Hi", "en-US", "../response_MM1")

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_cleanup_removes_file(self, tmp_path):
        backend = _backend(lambda r: _audio_response(b"voice"), tmp_path)
        path = await backend.synthesize_to_file("Hi", "en-US", "response_MM2")

        await backend.cleanup(path)
        await backend.cleanup(path)

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_failure_raises_synthesis_error(self, tmp_path):
        backend = _backend(lambda r: httpx.Response(403), tmp_path)

        with pytest.raises(SynthesisError):
            await backend.synthesize("Hi")

    @pytest.mark.asyncio
    async def test_missing_audio_content(self, tmp_path):
        backend = _backend(lambda r: httpx.Response(200, json={}), tmp_path)

        with pytest.raises(SynthesisError):
            await backend.synthesize("Hi")


class TestStubTTSBackend:

    @pytest.mark.asyncio
    async def test_deterministic_bytes(self, tmp_path):
        payload = await StubTTSBackend(tmp_path).synthesize("abc")
        assert len(payload.data) == 30

    @pytest.mark.asyncio
    async def test_empty_text_fails(self, tmp_path):
        with pytest.raises(SynthesisError):
            await StubTTSBackend(tmp_path).synthesize("")
