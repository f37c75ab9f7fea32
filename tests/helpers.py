"""Test doubles shared by the test modules."""

import asyncio
import threading

from viewlingo.backends.base import (
    BoundingBox,
    OCRBackend,
    RecognitionMode,
    RecognizedSpan,
    TranslationSession,
)


class FakeSession(TranslationSession):
    """In-memory translation session recording every batch it receives."""

    def __init__(self, pair, translations=None, delay=0.0, error=None, result=None):
        super().__init__(pair)
        self.translations = translations or {}
        self.delay = delay
        self.error = error
        self.result = result
        self.calls: list[list[str]] = []

    async def translate_batch(self, texts):
        self.calls.append(list(texts))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return [self.translations.get(text, f"<{self.pair.target}> {text}") for text in texts]

    @property
    def texts_sent(self) -> list[str]:
        return [text for batch in self.calls for text in batch]


def span(text, confidence=0.9, x=0.1, y=0.1, width=0.5, height=0.1):
    return RecognizedSpan(
        text=text,
        confidence=confidence,
        bounding_box=BoundingBox(x=x, y=y, width=width, height=height),
    )


class FakeOCRBackend(OCRBackend):
    """OCR backend returning canned spans, optionally blocking until released."""

    def __init__(self, spans=None, error=None, block=False):
        self.spans = spans or []
        self.error = error
        self.modes: list[RecognitionMode] = []
        self.release = threading.Event()
        if not block:
            self.release.set()
        self._loaded = False

    def load(self):
        self._loaded = True

    def is_loaded(self):
        return self._loaded

    def recognize(self, image, mode):
        self.modes.append(mode)
        self.release.wait(timeout=5.0)
        if self.error is not None:
            raise self.error
        return list(self.spans)
