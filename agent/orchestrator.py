"""
Whatstutor Message Orchestrator

Single recovery boundary for inbound WhatsApp messages. Classifies each
message, drives the adapters in sequence and turns any failure into one
apology for the user.

    Received → Text ──────────────────────────────┐
             → Voice → Retrieved → Transcribed →   ├→ Responded → Delivered
                       Confirmed ──────────────────┘
    any failure → Failed (apology sent)
"""

import logging
from typing import Optional

from agent.language import LanguageDetector, MarkerWordLanguageDetector
from errors import AppError, ValidationError
from inference import AgentBackend, AgentReply
from services.audio import AUDIO_EXTENSION, AudioRetriever
from services.stt import LanguageDetectingTranscriber
from services.tts import TTSBackend
from transport.whatsapp.schemas import InboundMessage
from transport.whatsapp.sender import WhatsAppSender

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "I'm having trouble processing your message. Please try again later."

_LANGUAGE_CODES = {
    "en": "en-US",
    "en-us": "en-US",
    "es": "es-ES",
    "es-es": "es-ES",
    "es-us": "es-US",
}


def map_language_code(language: Optional[str], default: str = "en-US") -> str:
    """Map a detected language tag to a synthesis voice language."""
    if not language:
        return default
    return _LANGUAGE_CODES.get(language.lower(), default)


def confirmation_text(transcribed: str) -> str:
    return f'🎤 I heard: "{transcribed}"\n\nLet me respond...'


class MessageOrchestrator:
    """
    Drives one inbound message through the adapters.

    All collaborators are injected; the orchestrator holds no state of its
    own between messages.
    """

    def __init__(
        self,
        audio: AudioRetriever,
        transcriber: LanguageDetectingTranscriber,
        agent: AgentBackend,
        tts: TTSBackend,
        sender: WhatsAppSender,
        language_detector: Optional[LanguageDetector] = None,
        send_max_attempts: int = 3,
        default_voice_language: str = "en-US",
    ):
        self.audio = audio
        self.transcriber = transcriber
        self.agent = agent
        self.tts = tts
        self.sender = sender
        self.language_detector = language_detector or MarkerWordLanguageDetector()
        self.send_max_attempts = send_max_attempts
        self.default_voice_language = default_voice_language

    async def _send(self, to: str, body: str):
        return await self.sender.send_text_with_retry(to, body, self.send_max_attempts)

    # ========================================================================
    # ENTRY POINT
    # ========================================================================

    async def handle_incoming_message(self, message: InboundMessage) -> None:
        """
        Process one inbound message. Never raises.
        """
        logger.info(
            "Processing incoming message",
            extra={
                "from": message.sender_id,
                "message_sid": message.message_id,
                "num_media": message.num_media,
            },
        )

        try:
            if message.num_media > 0:
                await self.handle_voice_message(message)
            elif message.body:
                await self.handle_text_message(message)
            else:
                raise ValidationError("Invalid message format")
        except Exception as e:
            logger.error(
                f"Error processing message: {e}",
                exc_info=True,
                extra={"from": message.sender_id, "error": str(e)},
            )
            await self.send_error_message(message.sender_id, e)

    # ========================================================================
    # TEXT PATH
    # ========================================================================

    async def handle_text_message(self, message: InboundMessage) -> AgentReply:
        text = message.body or ""
        language = self.language_detector.detect(text)

        logger.info(
            "Processing text message",
            extra={"from": message.sender_id, "language": language},
        )

        reply = await self.agent.detect_intent(text, message.sender_id, language)
        await self._send(message.sender_id, reply.text)

        logger.info("Text message processed successfully", extra={"from": message.sender_id})
        return reply

    # ========================================================================
    # VOICE PATH
    # ========================================================================

    async def handle_voice_message(self, message: InboundMessage) -> AgentReply:
        logger.info(
            "Processing voice message",
            extra={"from": message.sender_id, "media_url": message.media_url},
        )

        if not message.media_url:
            raise ValidationError("Voice message has no media URL")

        scratch_name = f"{message.message_id}{AUDIO_EXTENSION}"
        response_path = None
        try:
            audio = await self.audio.process_voice_note(message.media_url, message.message_id)

            transcription = await self.transcriber.transcribe_with_detection(audio)
            logger.info(
                "Transcription complete",
                extra={"text": transcription.text, "language": transcription.language},
            )

            await self._send(message.sender_id, confirmation_text(transcription.text))

            reply = await self.agent.detect_intent(
                transcription.text,
                message.sender_id,
                transcription.language,
            )

            # Synthesized reply is not delivered: the gateway needs a public
            # media URL and none is served yet.
            response_path = await self.tts.synthesize_to_file(
                reply.text,
                map_language_code(transcription.language, self.default_voice_language),
                f"response_{message.message_id}",
            )

            await self._send(message.sender_id, reply.text)

            logger.info("Voice message processed successfully", extra={"from": message.sender_id})
            return reply
        finally:
            await self.audio.cleanup(scratch_name)
            if response_path is not None:
                await self.tts.cleanup(response_path)

    # ========================================================================
    # FAILURE
    # ========================================================================

    async def send_error_message(self, to: str, error: BaseException) -> None:
        """Send one apology. Delivery failures are logged only."""
        if isinstance(error, AppError) and error.is_operational:
            text = f"❌ {error.message}"
        else:
            text = f"❌ {GENERIC_ERROR_MESSAGE}"

        try:
            await self._send(to, text)
        except Exception as send_error:
            logger.error(
                f"Failed to send error message: {send_error}",
                extra={"to": to},
            )
