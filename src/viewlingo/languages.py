"""Supported languages and language pairs."""

from dataclasses import dataclass
from enum import Enum


class Language(Enum):
    """Languages the app can recognize and translate between."""

    ENGLISH = "en"
    KOREAN = "ko"
    JAPANESE = "ja"
    CHINESE = "zh"
    FRENCH = "fr"
    GERMAN = "de"
    SPANISH = "es"
    ITALIAN = "it"
    PORTUGUESE = "pt"
    DUTCH = "nl"
    POLISH = "pl"
    RUSSIAN = "ru"

    @property
    def display_name(self) -> str:
        """Human-readable name for the language."""
        names = {
            Language.ENGLISH: "English",
            Language.KOREAN: "Korean",
            Language.JAPANESE: "Japanese",
            Language.CHINESE: "Chinese",
            Language.FRENCH: "French",
            Language.GERMAN: "German",
            Language.SPANISH: "Spanish",
            Language.ITALIAN: "Italian",
            Language.PORTUGUESE: "Portuguese",
            Language.DUTCH: "Dutch",
            Language.POLISH: "Polish",
            Language.RUSSIAN: "Russian",
        }
        return names.get(self, self.value)

    @property
    def uses_latin_script(self) -> bool:
        """Whether this language is written in Latin script."""
        return self not in {
            Language.KOREAN,
            Language.JAPANESE,
            Language.CHINESE,
            Language.RUSSIAN,
        }


def parse_language(code: str | None) -> Language | None:
    """Resolve a language code to a supported Language.

    Accepts BCP-47 style tags ("en-US", "zh_Hans", "KO") by keeping the
    primary subtag only.

    Args:
        code: Language code or tag.

    Returns:
        The matching Language, or None for unknown or empty codes.
    """
    if not code:
        return None
    primary = code.strip().replace("_", "-").split("-", 1)[0].lower()
    try:
        return Language(primary)
    except ValueError:
        return None


def is_supported(code: str | None) -> bool:
    """Check whether a code resolves to a supported language."""
    return parse_language(code) is not None


@dataclass(frozen=True)
class LanguagePair:
    """Ordered (source, target) language codes, used as a lookup key."""

    source: str
    target: str

    @classmethod
    def of(cls, source: str, target: str) -> "LanguagePair":
        """Build a pair, normalizing known codes to their primary subtag.

        Unknown codes are kept lowercased so that lookups still fail cleanly.
        """
        return cls(_normalize(source), _normalize(target))

    @property
    def is_identity(self) -> bool:
        """Whether source and target are the same language."""
        return self.source == self.target

    @property
    def is_supported(self) -> bool:
        """Whether both codes are supported languages."""
        return is_supported(self.source) and is_supported(self.target)

    def __str__(self) -> str:
        return f"{self.source}->{self.target}"


def _normalize(code: str) -> str:
    language = parse_language(code)
    if language is not None:
        return language.value
    return (code or "").strip().lower()
