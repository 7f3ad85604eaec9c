"""
Speech-to-Text service exports.

Clean interface for the orchestrator to import STT components.
"""

from .base import (
    ALTERNATIVE_LANGUAGE_CODES,
    NO_SPEECH_MESSAGE,
    STTBackend,
    Transcription,
)
from .detection import LanguageDetectingTranscriber
from .google import GoogleSpeechSTTBackend
from .stub import StubSTTBackend

__all__ = [
    "ALTERNATIVE_LANGUAGE_CODES",
    "NO_SPEECH_MESSAGE",
    "STTBackend",
    "Transcription",
    "LanguageDetectingTranscriber",
    "GoogleSpeechSTTBackend",
    "StubSTTBackend",
]
