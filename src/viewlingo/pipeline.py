"""Camera frame -> OCR -> translation, one frame at a time."""

import time
from dataclasses import dataclass
from typing import Any

from . import log
from .backends.base import RecognizedSpan
from .ocr import OCRService
from .orchestrator import TranslationOrchestrator

logger = log.get_logger("pipeline")


@dataclass(frozen=True)
class TranslatedSpan:
    """A detected span with its translation."""

    span: RecognizedSpan
    translation: str

    @property
    def text(self) -> str:
        return self.span.text


class CameraTranslator:
    """Feeds camera frames through OCR and translates the detected spans.

    Frames arriving while the previous one is still being recognized are
    dropped by the OCR service; process_frame() then returns None.
    """

    def __init__(
        self,
        ocr: OCRService,
        orchestrator: TranslationOrchestrator,
        target_language: str,
        source_language: str | None = None,
    ):
        self._ocr = ocr
        self._orchestrator = orchestrator
        self.target_language = target_language
        self.source_language = source_language

    @property
    def ocr(self) -> OCRService:
        return self._ocr

    async def process_frame(self, image: Any) -> list[TranslatedSpan] | None:
        """Recognize and translate the text in one frame.

        Returns:
            Translated spans in detection order (best confidence first),
            or None if the frame was dropped.
        """
        start = time.perf_counter()
        if not await self._ocr.process_image(image):
            return None
        ocr_ms = int((time.perf_counter() - start) * 1000)

        spans = self._ocr.detected_texts
        if not spans:
            return []

        translate_start = time.perf_counter()
        translations = await self._orchestrator.translate_texts(
            [span.text for span in spans],
            self.target_language,
            source_language=self.source_language,
        )
        translate_ms = int((time.perf_counter() - translate_start) * 1000)

        results = [
            TranslatedSpan(span=span, translation=translations[span.text])
            for span in spans
            if span.text in translations
        ]
        if log.is_debug_enabled():
            logger.debug(
                "frame processed",
                spans=len(spans),
                translated=len(results),
                ocr_ms=ocr_ms,
                translate_ms=translate_ms,
            )
        return results
