"""Best-effort language detection for short OCR snippets.

Camera text is short (signs, menus, labels), so detection works from the
writing system first and, for Latin script, from common words and
language-specific letters. Results below the confidence threshold are
reported as unknown rather than guessed.
"""

import re
import unicodedata
from dataclasses import dataclass

from .languages import Language

DEFAULT_MIN_CONFIDENCE = 0.5

_WORD_RE = re.compile(r"[^\W\d_]+", re.UNICODE)

# Common short words per Latin-script language
COMMON_WORDS: dict[Language, set[str]] = {
    Language.ENGLISH: {
        "the", "and", "is", "are", "you", "to", "of", "in", "for", "on", "with",
        "this", "that", "it", "hello", "world", "good", "morning", "thank",
        "thanks", "please", "welcome", "how", "what", "where", "exit", "open",
        "closed", "no", "not", "my", "your", "test", "text", "cache",
    },
    Language.FRENCH: {
        "le", "la", "les", "et", "est", "un", "une", "des", "du", "je", "vous",
        "nous", "bonjour", "merci", "bienvenue", "sortie", "ouvert", "fermé",
        "pour", "avec", "sur", "pas", "oui", "au", "revoir",
    },
    Language.SPANISH: {
        "el", "la", "los", "las", "y", "es", "un", "una", "de", "que", "hola",
        "gracias", "bienvenido", "salida", "abierto", "cerrado", "por", "para",
        "con", "buenos", "días", "señor", "sí",
    },
    Language.GERMAN: {
        "der", "die", "das", "und", "ist", "ein", "eine", "nicht", "ich", "sie",
        "hallo", "danke", "willkommen", "ausgang", "geöffnet", "geschlossen",
        "mit", "für", "auf", "guten", "morgen", "bitte",
    },
    Language.ITALIAN: {
        "il", "lo", "gli", "e", "è", "di", "che", "ciao", "grazie", "benvenuto",
        "uscita", "aperto", "chiuso", "per", "con", "buongiorno", "sono",
    },
    Language.PORTUGUESE: {
        "o", "os", "as", "e", "é", "um", "uma", "do", "da", "não", "olá",
        "obrigado", "obrigada", "bem-vindo", "saída", "aberto", "fechado",
        "com", "bom", "dia",
    },
    Language.DUTCH: {
        "de", "het", "een", "en", "is", "niet", "ik", "hallo", "dank", "bedankt",
        "welkom", "uitgang", "open", "gesloten", "met", "voor", "goedemorgen",
    },
    Language.POLISH: {
        "i", "w", "z", "na", "nie", "jest", "to", "się", "cześć", "dziękuję",
        "witamy", "wyjście", "otwarte", "zamknięte", "dzień", "dobry",
    },
}

# Letters that only (or mostly) occur in one Latin-script language
DISTINCTIVE_LETTERS: dict[Language, set[str]] = {
    Language.SPANISH: set("ñ¿¡"),
    Language.GERMAN: set("ßäöü"),
    Language.FRENCH: set("çèêëœ"),
    Language.PORTUGUESE: set("ãõ"),
    Language.POLISH: set("łśżźćńą"),
}


@dataclass(frozen=True)
class DetectionResult:
    """Detected language and the detector's confidence (0.0-1.0)."""

    language: Language
    confidence: float


def _script_of(char: str) -> str | None:
    """Classify a character by writing system."""
    code = ord(char)
    if 0xAC00 <= code <= 0xD7AF or 0x1100 <= code <= 0x11FF or 0x3130 <= code <= 0x318F:
        return "hangul"
    if 0x3040 <= code <= 0x309F or 0x30A0 <= code <= 0x30FF or 0xFF65 <= code <= 0xFF9F:
        return "kana"
    if 0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DBF:
        return "han"
    if 0x0400 <= code <= 0x04FF:
        return "cyrillic"
    if char.isalpha() and unicodedata.name(char, "").startswith("LATIN"):
        return "latin"
    return None


class LanguageDetector:
    """Detects the language of a short text.

    Usage:
        detector = LanguageDetector()
        detector.detect_language("안녕하세요")  # "ko"
        detector.detect_language("12345")       # None
    """

    def __init__(self, min_confidence: float = DEFAULT_MIN_CONFIDENCE):
        """Initialize the detector.

        Args:
            min_confidence: Results below this confidence are reported as None.
        """
        self._min_confidence = min_confidence

    @property
    def min_confidence(self) -> float:
        return self._min_confidence

    def detect(self, text: str) -> DetectionResult | None:
        """Detect the language of a text with its confidence.

        Returns:
            DetectionResult, or None if the text holds no letters or the
            confidence is below the threshold.
        """
        if not text or not text.strip():
            return None

        counts: dict[str, int] = {}
        for char in text:
            script = _script_of(char)
            if script is not None:
                counts[script] = counts.get(script, 0) + 1

        letters = sum(counts.values())
        if letters == 0:
            return None

        result = self._classify(text, counts, letters)
        if result is None or result.confidence < self._min_confidence:
            return None
        return result

    def detect_language(self, text: str) -> str | None:
        """Detect the language code of a text, or None when unsure."""
        result = self.detect(text)
        return result.language.value if result else None

    def _classify(self, text: str, counts: dict[str, int], letters: int) -> DetectionResult | None:
        hangul = counts.get("hangul", 0)
        kana = counts.get("kana", 0)
        han = counts.get("han", 0)
        cyrillic = counts.get("cyrillic", 0)
        latin = counts.get("latin", 0)

        if hangul:
            return DetectionResult(Language.KOREAN, (hangul + han) / letters)
        if kana:
            # Japanese mixes kana with kanji
            return DetectionResult(Language.JAPANESE, (kana + han) / letters)
        if han:
            # Kanji-only text may also be Japanese
            return DetectionResult(Language.CHINESE, 0.8 * han / letters)
        if cyrillic:
            return DetectionResult(Language.RUSSIAN, cyrillic / letters)
        if latin:
            return self._classify_latin(text, latin / letters)
        return None

    def _classify_latin(self, text: str, script_share: float) -> DetectionResult | None:
        words = [word.lower() for word in _WORD_RE.findall(text)]
        if not words:
            return None

        scores: dict[Language, float] = {}
        for language, vocabulary in COMMON_WORDS.items():
            hits = sum(1 for word in words if word in vocabulary)
            if hits:
                scores[language] = float(hits)

        lowered = text.lower()
        for language, letters in DISTINCTIVE_LETTERS.items():
            if any(char in letters for char in lowered):
                scores[language] = scores.get(language, 0.0) + 1.0

        if not scores:
            return None

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        best_language, best_score = ranked[0]
        confidence = min(best_score / len(words), 1.0) * script_share
        if len(ranked) > 1 and ranked[1][1] == best_score:
            # Tie between languages
            confidence *= 0.4
        return DetectionResult(best_language, confidence)
