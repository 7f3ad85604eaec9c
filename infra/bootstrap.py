"""
Infrastructure initialization and bootstrap.

Builds the whole object graph once per process: one shared HTTP client, the
session store, every adapter, the orchestrator and the dispatcher.
"""

import logging
from typing import Optional

import httpx

from agent.dispatcher import MessageDispatcher
from agent.language import MarkerWordLanguageDetector
from agent.orchestrator import MessageOrchestrator
from agent.sessions import InMemorySessionStore, SessionStore
from services.audio import AudioRetriever
from services.stt import LanguageDetectingTranscriber

from .config import InfraConfig, get_config

logger = logging.getLogger(__name__)


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        session_store: Optional[SessionStore] = None,
    ):
        """Initialize bootstrap with configuration."""
        self.settings = config or get_config()
        settings = self.settings

        self.http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_s)
        self.session_store = session_store or InMemorySessionStore(settings.session_timeout_ms)

        token_provider = settings.create_token_provider() if settings.uses_google else None

        self.audio = AudioRetriever(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            scratch_dir=settings.scratch_dir,
            max_audio_size=settings.max_audio_size,
            http_client=self.http_client,
            timeout_s=settings.http_timeout_s,
        )
        self.stt_backend = settings.create_stt_backend(self.http_client, token_provider)
        self.transcriber = LanguageDetectingTranscriber(
            self.stt_backend,
            default_language=settings.stt_language,
            alternate_language=settings.stt_alternate_language,
        )
        self.agent_backend = settings.create_agent_backend(
            self.session_store, self.http_client, token_provider
        )
        self.tts_backend = settings.create_tts_backend(self.http_client, token_provider)
        self.sender = settings.create_sender(self.http_client)

        self.orchestrator = MessageOrchestrator(
            audio=self.audio,
            transcriber=self.transcriber,
            agent=self.agent_backend,
            tts=self.tts_backend,
            sender=self.sender,
            language_detector=MarkerWordLanguageDetector(),
            send_max_attempts=settings.send_max_attempts,
            default_voice_language=settings.tts_language,
        )
        self.dispatcher = MessageDispatcher(
            self.orchestrator.handle_incoming_message,
            workers=settings.dispatch_workers,
        )

        logger.info(f"Infrastructure ready: {self!r}")

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    async def aclose(self) -> None:
        """Stop the dispatcher and release the HTTP client."""
        await self.dispatcher.stop()
        await self.http_client.aclose()

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(stt={self.settings.stt_backend}, "
            f"tts={self.settings.tts_backend}, "
            f"agent={self.settings.agent_backend}, "
            f"sender={self.settings.sender_backend})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)
