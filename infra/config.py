"""
Infrastructure configuration system.

Environment-based backend selection. The Google and Twilio backends are the
production stack; the stub and dry-run backends run fully offline.
"""

import os
from dataclasses import dataclass, field
from typing import List, Literal, Optional

import httpx

from agent.sessions import SessionStore
from config import Config
from inference import AgentBackend, DialogflowCXBackend, StubAgentBackend
from services.google_auth import GoogleCredentialsProvider, TokenProvider
from services.stt import GoogleSpeechSTTBackend, STTBackend, StubSTTBackend
from services.tts import GoogleTTSBackend, StubTTSBackend, TTSBackend
from transport.whatsapp.sender import (
    DryRunWhatsAppSender,
    TwilioWhatsAppSender,
    WhatsAppSender,
)


STTBackendType = Literal["google", "stub"]
TTSBackendType = Literal["google", "stub"]
AgentBackendType = Literal["dialogflow", "stub"]
SenderBackendType = Literal["twilio", "dry_run"]


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Backends
    stt_backend: STTBackendType = "google"
    tts_backend: TTSBackendType = "google"
    agent_backend: AgentBackendType = "dialogflow"
    sender_backend: SenderBackendType = "twilio"

    # Twilio
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_number: str = ""
    validate_signature: bool = False
    public_webhook_url: str = ""

    # Google
    google_project_id: str = ""
    google_credentials_path: str = ""
    dialogflow_location: str = "global"
    dialogflow_agent_id: str = ""

    # Speech
    stt_language: str = "en-US"
    stt_alternate_language: str = "es-ES"
    tts_language: str = "en-US"
    supported_languages: List[str] = field(default_factory=lambda: ["en", "es"])

    # Application
    session_timeout_ms: int = 3600000
    max_audio_size: int = 16 * 1024 * 1024
    scratch_dir: str = "temp"
    send_max_attempts: int = 3
    dispatch_workers: int = 4
    http_timeout_s: float = 30.0

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults select the production stack:
        - STT: Google Speech-to-Text
        - TTS: Google Text-to-Speech
        - Agent: Dialogflow CX
        - Sender: Twilio
        """
        return cls(
            stt_backend=os.getenv("STT_BACKEND", "google"),  # type: ignore
            tts_backend=os.getenv("TTS_BACKEND", "google"),  # type: ignore
            agent_backend=os.getenv("AGENT_BACKEND", "dialogflow"),  # type: ignore
            sender_backend=os.getenv("SENDER_BACKEND", "twilio"),  # type: ignore
            twilio_account_sid=Config.TWILIO_ACCOUNT_SID,
            twilio_auth_token=Config.TWILIO_AUTH_TOKEN,
            twilio_whatsapp_number=Config.TWILIO_WHATSAPP_NUMBER,
            validate_signature=Config.TWILIO_VALIDATE_SIGNATURE,
            public_webhook_url=Config.PUBLIC_WEBHOOK_URL,
            google_project_id=Config.GOOGLE_PROJECT_ID,
            google_credentials_path=Config.GOOGLE_APPLICATION_CREDENTIALS,
            dialogflow_location=Config.DIALOGFLOW_LOCATION,
            dialogflow_agent_id=Config.DIALOGFLOW_AGENT_ID,
            stt_language=Config.SPEECH_TO_TEXT_LANGUAGE,
            stt_alternate_language=Config.SPEECH_ALTERNATE_LANGUAGE,
            tts_language=Config.TEXT_TO_SPEECH_LANGUAGE,
            supported_languages=list(Config.SUPPORTED_LANGUAGES),
            session_timeout_ms=Config.SESSION_TIMEOUT,
            max_audio_size=Config.MAX_AUDIO_SIZE,
            scratch_dir=Config.SCRATCH_DIR,
            send_max_attempts=Config.SEND_MAX_ATTEMPTS,
            dispatch_workers=Config.DISPATCH_WORKERS,
            http_timeout_s=Config.HTTP_TIMEOUT_S,
        )

    @property
    def uses_google(self) -> bool:
        return (
            self.stt_backend == "google"
            or self.tts_backend == "google"
            or self.agent_backend == "dialogflow"
        )

    def create_token_provider(self) -> TokenProvider:
        """Google OAuth token source shared by the Google backends."""
        return GoogleCredentialsProvider(self.google_credentials_path or None)

    def create_stt_backend(
        self,
        http_client: httpx.AsyncClient,
        token_provider: Optional[TokenProvider] = None,
    ) -> STTBackend:
        """Create STT backend instance based on configuration."""
        if self.stt_backend == "stub":
            return StubSTTBackend()
        return GoogleSpeechSTTBackend(
            token_provider=token_provider or self.create_token_provider(),
            http_client=http_client,
            timeout_s=self.http_timeout_s,
        )

    def create_tts_backend(
        self,
        http_client: httpx.AsyncClient,
        token_provider: Optional[TokenProvider] = None,
    ) -> TTSBackend:
        """Create TTS backend instance based on configuration."""
        if self.tts_backend == "stub":
            return StubTTSBackend(scratch_dir=self.scratch_dir)
        return GoogleTTSBackend(
            token_provider=token_provider or self.create_token_provider(),
            scratch_dir=self.scratch_dir,
            http_client=http_client,
            timeout_s=self.http_timeout_s,
        )

    def create_agent_backend(
        self,
        session_store: SessionStore,
        http_client: httpx.AsyncClient,
        token_provider: Optional[TokenProvider] = None,
    ) -> AgentBackend:
        """Create conversational-agent backend instance based on configuration."""
        if self.agent_backend == "stub":
            return StubAgentBackend(session_store=session_store)
        return DialogflowCXBackend(
            project_id=self.google_project_id,
            location=self.dialogflow_location,
            agent_id=self.dialogflow_agent_id,
            session_store=session_store,
            token_provider=token_provider or self.create_token_provider(),
            http_client=http_client,
            timeout_s=self.http_timeout_s,
        )

    def create_sender(self, http_client: httpx.AsyncClient) -> WhatsAppSender:
        """Create outbound sender instance based on configuration."""
        if self.sender_backend == "dry_run":
            return DryRunWhatsAppSender()
        return TwilioWhatsAppSender(
            account_sid=self.twilio_account_sid,
            auth_token=self.twilio_auth_token,
            from_number=self.twilio_whatsapp_number,
            http_client=http_client,
            timeout_s=self.http_timeout_s,
        )


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
