"""
Text language detection.

Decides which language tag to send to the conversational agent for a typed
message. Voice messages get their language from transcription instead.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterable

SPANISH_MARKERS = (
    "hola",
    "gracias",
    "por favor",
    "buenos",
    "días",
    "cómo",
    "está",
    "qué",
    "sí",
    "no",
)


class LanguageDetector(ABC):
    """Maps message text to a short language tag ("en", "es", ...)."""

    @abstractmethod
    def detect(self, text: str) -> str:
        raise NotImplementedError


class MarkerWordLanguageDetector(LanguageDetector):
    """
    Whole-word marker heuristic.

    Any marker present (case-insensitive) selects the marker language,
    otherwise the default language.
    """

    def __init__(
        self,
        markers: Iterable[str] = SPANISH_MARKERS,
        marker_language: str = "es",
        default_language: str = "en",
    ):
        self.marker_language = marker_language
        self.default_language = default_language
        alternation = "|".join(re.escape(marker) for marker in markers)
        # \b is unicode-aware for str patterns, so accented markers match
        self._pattern = re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)

    def detect(self, text: str) -> str:
        if text and self._pattern.search(text):
            return self.marker_language
        return self.default_language
