"""
Text language detection tests.
"""

import pytest

from agent.language import MarkerWordLanguageDetector
from agent.orchestrator import map_language_code


class TestMarkerWordLanguageDetector:

    @pytest.mark.parametrize(
        "text",
        ["Hola, ¿cómo estás?", "GRACIAS", "por favor ayúdame", "Buenos días", "sí", "no sé"],
    )
    def test_spanish_markers(self, text):
        assert MarkerWordLanguageDetector().detect(text) == "es"

    @pytest.mark.parametrize(
        "text",
        ["Hello there", "I need help with grammar", "nothing", "knowledge", "holas"],
    )
    def test_english_default(self, text):
        assert MarkerWordLanguageDetector().detect(text) == "en"

    def test_empty_text(self):
        assert MarkerWordLanguageDetector().detect("") == "en"

    def test_custom_markers(self):
        detector = MarkerWordLanguageDetector(markers=["bonjour"], marker_language="fr")
        assert detector.detect("Bonjour!") == "fr"
        assert detector.detect("Hola") == "en"


class TestMapLanguageCode:

    @pytest.mark.parametrize(
        "language, expected",
        [
            ("en", "en-US"),
            ("en-US", "en-US"),
            ("EN-us", "en-US"),
            ("es", "es-ES"),
            ("es-ES", "es-ES"),
            ("es-us", "es-US"),
            ("fr-FR", "en-US"),
            (None, "en-US"),
            ("", "en-US"),
        ],
    )
    def test_mapping(self, language, expected):
        assert map_language_code(language) == expected

    def test_unmapped_language_uses_given_default(self):
        assert map_language_code("fr-FR", default="es-ES") == "es-ES"
        assert map_language_code("es", default="en-GB") == "es-ES"
