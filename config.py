"""
Configuration management for Whatstutor.

Loads environment variables from .env file and provides typed access to configuration.
"""

import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """Configuration class for Whatstutor."""

    # Server
    PORT = int(os.getenv("PORT", "3000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Twilio (WhatsApp gateway)
    TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
    TWILIO_WHATSAPP_NUMBER = os.getenv("TWILIO_WHATSAPP_NUMBER", "")
    TWILIO_VALIDATE_SIGNATURE = _env_bool("TWILIO_VALIDATE_SIGNATURE", "false")
    PUBLIC_WEBHOOK_URL = os.getenv("PUBLIC_WEBHOOK_URL", "")

    # Google Cloud
    GOOGLE_PROJECT_ID = os.getenv("GOOGLE_PROJECT_ID", "")
    GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "")
    DIALOGFLOW_LOCATION = os.getenv("DIALOGFLOW_LOCATION", "global")
    DIALOGFLOW_AGENT_ID = os.getenv("DIALOGFLOW_AGENT_ID", "")

    # Speech
    SPEECH_TO_TEXT_LANGUAGE = os.getenv("SPEECH_TO_TEXT_LANGUAGE", "en-US")
    SPEECH_ALTERNATE_LANGUAGE = os.getenv("SPEECH_ALTERNATE_LANGUAGE", "es-ES")
    TEXT_TO_SPEECH_LANGUAGE = os.getenv("TEXT_TO_SPEECH_LANGUAGE", "en-US")
    SUPPORTED_LANGUAGES = [
        lang.strip()
        for lang in os.getenv("SUPPORTED_LANGUAGES", "en,es").split(",")
        if lang.strip()
    ]

    # Application
    SESSION_TIMEOUT = int(os.getenv("SESSION_TIMEOUT", "3600000"))  # ms, 1 hour
    MAX_AUDIO_SIZE = int(os.getenv("MAX_AUDIO_SIZE", "16777216"))  # 16 MB
    SCRATCH_DIR = os.getenv("SCRATCH_DIR", str(Path(__file__).parent / "temp"))
    SEND_MAX_ATTEMPTS = int(os.getenv("SEND_MAX_ATTEMPTS", "3"))
    DISPATCH_WORKERS = int(os.getenv("DISPATCH_WORKERS", "4"))
    HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "30"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_DIR = os.getenv("LOG_DIR", str(Path(__file__).parent / "logs"))
    LOG_TO_FILE = _env_bool("LOG_TO_FILE", "true")

    REQUIRED = [
        "TWILIO_ACCOUNT_SID",
        "TWILIO_AUTH_TOKEN",
        "TWILIO_WHATSAPP_NUMBER",
        "GOOGLE_PROJECT_ID",
        "DIALOGFLOW_AGENT_ID",
    ]

    @classmethod
    def missing(cls) -> List[str]:
        """Names of required settings that are empty."""
        return [key for key in cls.REQUIRED if not getattr(cls, key)]

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        missing = cls.missing()

        if missing:
            logger.warning(f"Missing environment variables: {', '.join(missing)}")
            logger.warning("Copy .env.example to .env and fill in the required values.")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Port: {Config.PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"  Log Level: {Config.LOG_LEVEL}")
    print(f"  Twilio Account SID: {'✓ Set' if Config.TWILIO_ACCOUNT_SID else '✗ Missing'}")
    print(f"  Google Project: {Config.GOOGLE_PROJECT_ID or '✗ Missing'}")
    print(f"  Dialogflow Agent: {Config.DIALOGFLOW_AGENT_ID or '✗ Missing'}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
