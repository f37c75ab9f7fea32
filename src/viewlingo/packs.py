"""Language pack registry: which language pairs can be translated right now.

A pack is an on-device translation model for one (source, target) pair.
The registry keeps one PackStatus per known pair. Statuses are stale until
check_all_statuses() refreshes them; queries never trigger a check.
"""

import asyncio
from enum import Enum
from typing import Callable, Mapping

from . import log
from .backends.model_manager import ModelManager
from .languages import LanguagePair

logger = log.get_logger("packs")


class PackStatus(Enum):
    """Installation status of a language pack."""

    UNKNOWN = "unknown"
    CHECKING = "checking"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


# Helsinki-NLP OPUS-MT models on HuggingFace, one repository per pair.
PACK_CATALOG: dict[LanguagePair, str] = {
    # English to other languages
    LanguagePair("en", "ko"): "Helsinki-NLP/opus-mt-tc-big-en-ko",
    LanguagePair("en", "ja"): "Helsinki-NLP/opus-mt-en-jap",
    LanguagePair("en", "zh"): "Helsinki-NLP/opus-mt-en-zh",
    LanguagePair("en", "fr"): "Helsinki-NLP/opus-mt-en-fr",
    LanguagePair("en", "de"): "Helsinki-NLP/opus-mt-en-de",
    LanguagePair("en", "es"): "Helsinki-NLP/opus-mt-en-es",
    LanguagePair("en", "it"): "Helsinki-NLP/opus-mt-en-it",
    LanguagePair("en", "nl"): "Helsinki-NLP/opus-mt-en-nl",
    LanguagePair("en", "ru"): "Helsinki-NLP/opus-mt-en-ru",
    # Other languages to English
    LanguagePair("ko", "en"): "Helsinki-NLP/opus-mt-ko-en",
    LanguagePair("ja", "en"): "Helsinki-NLP/opus-mt-ja-en",
    LanguagePair("zh", "en"): "Helsinki-NLP/opus-mt-zh-en",
    LanguagePair("fr", "en"): "Helsinki-NLP/opus-mt-fr-en",
    LanguagePair("de", "en"): "Helsinki-NLP/opus-mt-de-en",
    LanguagePair("es", "en"): "Helsinki-NLP/opus-mt-es-en",
    LanguagePair("it", "en"): "Helsinki-NLP/opus-mt-it-en",
    LanguagePair("nl", "en"): "Helsinki-NLP/opus-mt-nl-en",
    LanguagePair("pl", "en"): "Helsinki-NLP/opus-mt-pl-en",
    LanguagePair("ru", "en"): "Helsinki-NLP/opus-mt-ru-en",
    # CJK
    LanguagePair("ja", "ko"): "Helsinki-NLP/opus-mt-ja-ko",
    LanguagePair("ja", "fr"): "Helsinki-NLP/opus-mt-ja-fr",
    LanguagePair("ja", "de"): "Helsinki-NLP/opus-mt-ja-de",
    LanguagePair("ja", "es"): "Helsinki-NLP/opus-mt-ja-es",
}

# probe(pair) -> True if the pack for this pair is installed
PackProbe = Callable[[LanguagePair], bool]


class HuggingFacePackProbe:
    """Reports a pack installed when its model is in the local HF cache."""

    def __init__(self, catalog: Mapping[LanguagePair, str], manager: ModelManager | None = None):
        self._catalog = catalog
        self._manager = manager or ModelManager()

    def __call__(self, pair: LanguagePair) -> bool:
        repo_id = self._catalog.get(pair)
        if not repo_id:
            return False
        return self._manager.is_installed(repo_id)


class LanguagePackRegistry:
    """Tracks per-pair pack availability.

    Create one instance per process and pass it to the components that need
    it. Status updates are single-key dict assignments, so readers always
    see either the old or the new status of a pair.
    """

    def __init__(
        self,
        catalog: Mapping[LanguagePair, str] | None = None,
        probe: PackProbe | None = None,
    ):
        """Initialize the registry.

        Args:
            catalog: Known pairs mapped to their model repository.
                Defaults to PACK_CATALOG.
            probe: Callable deciding whether a pair's pack is installed.
                Defaults to a Hugging Face cache lookup over the catalog.
        """
        self._catalog = dict(catalog if catalog is not None else PACK_CATALOG)
        self._probe = probe or HuggingFacePackProbe(self._catalog)
        self._statuses: dict[LanguagePair, PackStatus] = {
            pair: PackStatus.UNKNOWN for pair in self._catalog
        }
        self._refresh_task: asyncio.Task | None = None

    @property
    def pairs(self) -> list[LanguagePair]:
        """All known language pairs."""
        return list(self._catalog)

    @property
    def statuses(self) -> dict[LanguagePair, PackStatus]:
        """Snapshot of the current status of every known pair."""
        return dict(self._statuses)

    def repository_for(self, source: str, target: str) -> str | None:
        """Get the model repository backing a pair, if the pair is known."""
        return self._catalog.get(LanguagePair.of(source, target))

    def status(self, source: str, target: str) -> PackStatus:
        """Get the current status of a pair.

        Unknown or unsupported pairs report UNAVAILABLE.
        """
        pair = LanguagePair.of(source, target)
        if pair.is_identity or not pair.is_supported:
            return PackStatus.UNAVAILABLE
        return self._statuses.get(pair, PackStatus.UNAVAILABLE)

    def can_translate(self, source: str, target: str) -> bool:
        """Check whether text can currently be translated from source to target.

        Never raises and never starts a status check.

        Args:
            source: Source language code.
            target: Target language code.

        Returns:
            True only if the codes differ, are both supported, and the pair's
            pack is AVAILABLE.
        """
        return self.status(source, target) is PackStatus.AVAILABLE

    def set_status(self, pair: LanguagePair, status: PackStatus) -> None:
        """Record a status for a pair (used by installers and tests)."""
        if pair.is_identity or not pair.is_supported:
            raise ValueError(f"Pair {pair} cannot have a pack")
        if pair not in self._catalog:
            self._catalog[pair] = ""
        self._statuses[pair] = status

    async def check_all_statuses(self) -> None:
        """Refresh the status of every known pair.

        Concurrent callers await the same refresh.
        """
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.ensure_future(self._refresh())
        await asyncio.shield(self._refresh_task)

    async def _refresh(self) -> None:
        pairs = self.pairs
        for pair in pairs:
            self._statuses[pair] = PackStatus.CHECKING

        results = await asyncio.gather(
            *(asyncio.to_thread(self._probe, pair) for pair in pairs),
            return_exceptions=True,
        )

        available = 0
        for pair, result in zip(pairs, results):
            if isinstance(result, BaseException):
                logger.error("pack status check failed", pair=str(pair), error=str(result))
                self._statuses[pair] = PackStatus.UNAVAILABLE
            elif result:
                self._statuses[pair] = PackStatus.AVAILABLE
                available += 1
            else:
                self._statuses[pair] = PackStatus.UNAVAILABLE

        logger.info(
            "pack statuses refreshed",
            available=available,
            unavailable=len(pairs) - available,
        )
