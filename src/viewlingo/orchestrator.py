"""Translation orchestrator: recognized texts in, text -> translation out.

For one call the flow is:

    received -> filtered -> cache hit
                         -> needs session -> dispatched -> completed
                                          -> skipped (no session)
             -> result assembled

Partial problems (undetectable language, missing session, failing session)
drop the affected texts and are logged; the call itself always returns.
"""

import asyncio
from dataclasses import dataclass

from . import log
from .backends.base import TranslationSession
from .cache import CacheKey, TranslationCache
from .detection import LanguageDetector
from .languages import LanguagePair
from .sessions import SessionProvider, SessionRegistry

logger = log.get_logger("orchestrator")


@dataclass
class OrchestratorStats:
    """Counters describing what happened to submitted texts."""

    cache_hits: int = 0
    translated: int = 0
    batches_dispatched: int = 0
    batches_failed: int = 0
    skipped_empty: int = 0
    skipped_undetected: int = 0
    skipped_same_language: int = 0
    skipped_no_session: int = 0


class TranslationOrchestrator:
    """Coordinates cache, session registry and language detection.

    Usage:
        orchestrator = TranslationOrchestrator(cache, sessions)
        translations = await orchestrator.translate_texts(
            ["Good morning", "Thank you"], "ja", source_language="en"
        )
        translations["Thank you"]  # results are keyed by original text

    Batches for different language pairs are dispatched concurrently.
    A text already being translated by another call is awaited instead of
    being sent twice. Dispatches are shielded from caller cancellation:
    if a caller gives up, the batch still completes and its results are
    cached for later calls.
    """

    def __init__(
        self,
        cache: TranslationCache,
        sessions: SessionRegistry,
        detector: LanguageDetector | None = None,
        provider: SessionProvider | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            cache: Shared translation cache.
            sessions: Registry holding one session per language pair.
            detector: Language detector used when no source is given.
            provider: Optional provider used to create a session on demand
                when a pair has none registered.
        """
        self._cache = cache
        self._sessions = sessions
        self._detector = detector or LanguageDetector()
        self._provider = provider
        self._inflight: dict[CacheKey, asyncio.Future] = {}
        self._stats = OrchestratorStats()

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @property
    def sessions(self) -> SessionRegistry:
        return self._sessions

    @property
    def stats(self) -> OrchestratorStats:
        return self._stats

    def detect_language(self, text: str) -> str | None:
        """Detect the language code of a text.

        Returns:
            Language code, or None when detection is not confident enough.
            None means unknown; no default language is assumed.
        """
        return self._detector.detect_language(text)

    async def translate_texts(
        self,
        texts: list[str],
        target_language: str,
        source_language: str | None = None,
    ) -> dict[str, str]:
        """Translate a batch of texts.

        Args:
            texts: Texts to translate (typically OCR output).
            target_language: Target language code.
            source_language: Source language code. When omitted, the language
                of each text is detected individually.

        Returns:
            Mapping from original text to translation. Texts that were empty,
            undetectable, had no session or failed are absent.
        """
        results: dict[str, str] = {}
        pending: dict[LanguagePair, list[str]] = {}
        seen: set[str] = set()

        for text in texts:
            if not text or not text.strip():
                self._stats.skipped_empty += 1
                continue
            if text in seen:
                continue
            seen.add(text)

            source = source_language or self.detect_language(text)
            if source is None:
                self._stats.skipped_undetected += 1
                logger.debug("language not detected, skipping", text=text)
                continue

            pair = LanguagePair.of(source, target_language)
            if pair.is_identity:
                self._stats.skipped_same_language += 1
                continue

            cached = self._cache.lookup(text, pair.source, pair.target)
            if cached is not None:
                self._stats.cache_hits += 1
                results[text] = cached
                continue

            pending.setdefault(pair, []).append(text)

        if pending:
            groups = await asyncio.gather(
                *(self._translate_group(pair, group) for pair, group in pending.items())
            )
            for translations in groups:
                results.update(translations)

        return results

    async def wait_for_pending(self) -> None:
        """Wait until every in-flight dispatch has finished."""
        while self._inflight:
            await asyncio.gather(*set(self._inflight.values()), return_exceptions=True)

    async def _translate_group(self, pair: LanguagePair, texts: list[str]) -> dict[str, str]:
        session = self._session_for(pair)
        if session is None:
            self._stats.skipped_no_session += len(texts)
            logger.warning("no session registered", pair=str(pair), count=len(texts))
            return {}

        to_send: list[str] = []
        awaited: dict[str, asyncio.Future] = {}
        for text in texts:
            future = self._inflight.get(TranslationCache.make_key(text, pair.source, pair.target))
            if future is not None:
                awaited[text] = future
            else:
                to_send.append(text)

        if to_send:
            task = asyncio.ensure_future(self._dispatch(session, pair, to_send))
            for text in to_send:
                self._inflight[TranslationCache.make_key(text, pair.source, pair.target)] = task
                awaited[text] = task

        results: dict[str, str] = {}
        for future in set(awaited.values()):
            translations = await asyncio.shield(future)
            for text, translation in translations.items():
                if text in awaited:
                    results[text] = translation
        return results

    def _session_for(self, pair: LanguagePair) -> TranslationSession | None:
        session = self._sessions.get(pair.source, pair.target)
        if session is None and self._provider is not None:
            session = self._provider.ensure(self._sessions, pair.source, pair.target)
        return session

    async def _dispatch(
        self, session: TranslationSession, pair: LanguagePair, texts: list[str]
    ) -> dict[str, str]:
        """Send one batch to a session and cache the results.

        The batch succeeds or fails as a whole.
        """
        self._stats.batches_dispatched += 1
        this_task = asyncio.current_task()
        try:
            try:
                translations = await session.translate_batch(list(texts))
                if len(translations) != len(texts):
                    raise ValueError(
                        f"session returned {len(translations)} translations for {len(texts)} texts"
                    )
                if not all(isinstance(translation, str) for translation in translations):
                    raise TypeError("session returned a non-string translation")
            except Exception as e:
                self._stats.batches_failed += 1
                logger.error(
                    "session dispatch failed",
                    pair=str(pair),
                    count=len(texts),
                    error=str(e),
                )
                return {}

            results: dict[str, str] = {}
            for text, translation in zip(texts, translations):
                self._cache.insert(text, pair.source, pair.target, translation)
                results[text] = translation
            self._stats.translated += len(results)
            logger.debug("batch translated", pair=str(pair), count=len(results))
            return results
        finally:
            for text in texts:
                key = TranslationCache.make_key(text, pair.source, pair.target)
                if self._inflight.get(key) is this_task:
                    del self._inflight[key]
