"""
WhatsApp Normalization Tests

Twilio webhook fields → InboundMessage.
"""

import pydantic
import pytest

from transport.whatsapp.normalize import (
    NormalizationError,
    extract_sender_id,
    normalize_message,
)
from transport.whatsapp.schemas import InboundMessage


class TestTextNormalization:

    def test_text_message(self):
        message = normalize_message({
            "From": "whatsapp:+15551234567",
            "Body": "Hello tutor",
            "NumMedia": "0",
            "MessageSid": "SM123",
        })

        assert isinstance(message, InboundMessage)
        assert message.sender_id == "whatsapp:+15551234567"
        assert message.body == "Hello tutor"
        assert message.num_media == 0
        assert message.media_url is None
        assert message.message_id == "SM123"
        assert message.has_media is False

    def test_missing_num_media_defaults_to_zero(self):
        message = normalize_message({"From": "whatsapp:+1", "Body": "hi"})
        assert message.num_media == 0

    def test_json_integers_accepted(self):
        message = normalize_message({"From": "whatsapp:+1", "Body": "hi", "NumMedia": 0})
        assert message.num_media == 0


class TestVoiceNormalization:

    def test_voice_message(self):
        message = normalize_message({
            "From": "whatsapp:+15551234567",
            "Body": "",
            "NumMedia": "1",
            "MediaUrl0": "https://api.twilio.com/2010-04-01/Accounts/AC1/Messages/MM1/Media/ME1",
            "MediaContentType0": "audio/ogg",
            "MessageSid": "MM1",
        })

        assert message.num_media == 1
        assert message.has_media is True
        assert message.media_url.endswith("/Media/ME1")
        assert message.media_content_type == "audio/ogg"


class TestInvalidPayloads:

    def test_missing_from(self):
        with pytest.raises(NormalizationError):
            normalize_message({"Body": "hi"})

    def test_non_numeric_num_media(self):
        with pytest.raises(NormalizationError):
            normalize_message({"From": "whatsapp:+1", "NumMedia": "lots"})

    def test_negative_num_media(self):
        with pytest.raises(NormalizationError):
            normalize_message({"From": "whatsapp:+1", "NumMedia": "-1"})

    @pytest.mark.parametrize("sid", ["../victim", "a/b", "MM1\n", "..\\victim"])
    def test_message_sid_must_be_a_plain_token(self, sid):
        with pytest.raises(NormalizationError):
            normalize_message({"From": "whatsapp:+1", "NumMedia": "1", "MessageSid": sid})

    def test_extract_sender_id(self):
        assert extract_sender_id({"From": "whatsapp:+1"}) == "whatsapp:+1"
        with pytest.raises(NormalizationError):
            extract_sender_id({})


class TestImmutability:

    def test_inbound_message_is_frozen(self):
        message = normalize_message({"From": "whatsapp:+1", "Body": "hi"})
        with pytest.raises(pydantic.ValidationError):
            message.body = "changed"
