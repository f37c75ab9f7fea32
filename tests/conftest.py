"""Shared fixtures."""

import pytest

from viewlingo.cache import TranslationCache
from viewlingo.languages import LanguagePair
from viewlingo.orchestrator import TranslationOrchestrator
from viewlingo.packs import LanguagePackRegistry
from viewlingo.sessions import SessionRegistry

# Pairs reported as installed by the `packs` fixture
INSTALLED_PAIRS = {
    LanguagePair("en", "ko"),
    LanguagePair("en", "ja"),
    LanguagePair("ko", "en"),
}


@pytest.fixture
def cache():
    return TranslationCache()


@pytest.fixture
def sessions():
    return SessionRegistry()


@pytest.fixture
def orchestrator(cache, sessions):
    return TranslationOrchestrator(cache, sessions)


@pytest.fixture
def packs():
    """Registry whose probe reports INSTALLED_PAIRS as installed."""
    return LanguagePackRegistry(probe=lambda pair: pair in INSTALLED_PAIRS)
