"""Translation session registry and provider.

The registry holds at most one session per language pair and never creates
sessions itself. The provider builds sessions for pairs the language pack
registry reports as translatable.
"""

import threading
from typing import Callable

from . import log
from .backends.base import TranslationSession
from .languages import LanguagePair
from .packs import LanguagePackRegistry

logger = log.get_logger("sessions")

# factory(pair, repo_id) -> session
SessionFactory = Callable[[LanguagePair, str | None], TranslationSession]


class SessionRegistry:
    """Holds the active translation session for each language pair.

    Registering a session for a pair that already has one replaces the
    reference; the previous session is not closed.
    """

    def __init__(self):
        self._sessions: dict[LanguagePair, TranslationSession] = {}
        self._lock = threading.Lock()

    def register(self, session: TranslationSession, source: str, target: str) -> None:
        """Store or replace the session for a pair.

        Args:
            session: Session handle bound to the pair.
            source: Source language code.
            target: Target language code.
        """
        pair = LanguagePair.of(source, target)
        with self._lock:
            replaced = pair in self._sessions
            self._sessions[pair] = session
        logger.debug("session registered", pair=str(pair), replaced=replaced)

    def get(self, source: str, target: str) -> TranslationSession | None:
        """Get the session for a pair, or None if none was registered."""
        with self._lock:
            return self._sessions.get(LanguagePair.of(source, target))

    def unregister(self, source: str, target: str) -> TranslationSession | None:
        """Remove and return the session for a pair."""
        with self._lock:
            return self._sessions.pop(LanguagePair.of(source, target), None)

    def pairs(self) -> list[LanguagePair]:
        """Pairs that currently have a session."""
        with self._lock:
            return list(self._sessions)

    def clear(self) -> None:
        """Drop every session reference."""
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, pair: LanguagePair) -> bool:
        with self._lock:
            return pair in self._sessions


def _default_factory(pair: LanguagePair, repo_id: str | None) -> TranslationSession:
    from .backends.translation.opus_mt import OpusMTSession

    return OpusMTSession(pair, repo_id=repo_id)


class SessionProvider:
    """Creates translation sessions for translatable pairs.

    Usage:
        provider = SessionProvider(packs)
        session = provider.ensure(registry, "en", "ko")
        if session is None:
            ...  # pair unavailable
    """

    def __init__(
        self,
        packs: LanguagePackRegistry,
        factory: SessionFactory | None = None,
    ):
        """Initialize the provider.

        Args:
            packs: Registry used to check that a pair is translatable.
            factory: Builds a session for (pair, model repository).
                Defaults to an OPUS-MT session.
        """
        self._packs = packs
        self._factory = factory or _default_factory

    def create(self, source: str, target: str) -> TranslationSession | None:
        """Create a session for a pair.

        Returns:
            A new session, or None if the pair is not translatable or the
            session could not be built.
        """
        pair = LanguagePair.of(source, target)
        if not self._packs.can_translate(pair.source, pair.target):
            logger.debug("pair not translatable", pair=str(pair))
            return None

        try:
            session = self._factory(pair, self._packs.repository_for(pair.source, pair.target))
        except Exception as e:
            # Any factory failure leaves the pair unavailable
            logger.warning(
                "session creation failed",
                pair=str(pair),
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        logger.info("session created", pair=str(pair), session=repr(session))
        return session

    def ensure(self, registry: SessionRegistry, source: str, target: str) -> TranslationSession | None:
        """Get the registered session for a pair, creating one if needed."""
        session = registry.get(source, target)
        if session is not None:
            return session

        session = self.create(source, target)
        if session is not None:
            registry.register(session, source, target)
        return session
