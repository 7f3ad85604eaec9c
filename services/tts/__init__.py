"""
Text-to-Speech service exports.

Clean interface for the orchestrator to import TTS components.
"""

from .base import TTSBackend, VoiceProfile, VOICE_PROFILES, get_voice_profile
from .google import GoogleTTSBackend
from .stub import StubTTSBackend

__all__ = [
    "TTSBackend",
    "VoiceProfile",
    "VOICE_PROFILES",
    "get_voice_profile",
    "GoogleTTSBackend",
    "StubTTSBackend",
]
