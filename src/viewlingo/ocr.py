"""Recognition result buffer over an OCR backend.

Holds the spans of the latest recognition cycle. Only one image is
processed at a time: a request arriving while another is running, or too
soon after the previous one finished, is dropped rather than queued, so a
live camera feed never builds up a backlog.
"""

import asyncio
import time
from typing import Any, Callable

from . import log
from .backends.base import BoundingBox, OCRBackend, RecognitionMode, RecognizedSpan

logger = log.get_logger("ocr")

# Detection thresholds
DEFAULT_CONFIDENCE_THRESHOLD = 0.7  # Minimum confidence for a span to count as detected
DEFAULT_MAX_DETECTED_TEXTS = 10     # Detected spans kept per cycle
DEFAULT_MIN_INTERVAL = 0.25         # Seconds between the end of one cycle and the next

SpanListener = Callable[[list[RecognizedSpan]], None]

__all__ = [
    "BoundingBox",
    "OCRService",
    "RecognitionMode",
    "RecognizedSpan",
]


class OCRService:
    """Runs OCR on camera frames and keeps the latest results.

    Usage:
        service = OCRService(TesseractOCRBackend())
        await service.process_image(frame)
        for span in service.detected_texts:
            print(span.text, span.confidence)
    """

    def __init__(
        self,
        backend: OCRBackend,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        max_detected_texts: int = DEFAULT_MAX_DETECTED_TEXTS,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        mode: RecognitionMode = RecognitionMode.ACCURATE,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the service.

        Args:
            backend: OCR engine.
            confidence_threshold: Minimum confidence for detected spans (0.0-1.0).
            max_detected_texts: Maximum number of detected spans kept.
            min_interval: Requests arriving sooner than this after the last
                cycle finished are ignored. 0 disables the interval.
            mode: Initial recognition mode.
            clock: Monotonic time source (injectable for tests).
        """
        self._backend = backend
        self._confidence_threshold = confidence_threshold
        self._max_detected = max_detected_texts
        self._min_interval = min_interval
        self._mode = mode
        self._clock = clock

        self._recognized: list[RecognizedSpan] = []
        self._detected: list[RecognizedSpan] = []
        self._processing = False
        self._last_finished: float | None = None
        self._result_count = 0
        self._listeners: list[SpanListener] = []

    @property
    def is_processing(self) -> bool:
        """Whether an image is currently being processed."""
        return self._processing

    @property
    def recognized_texts(self) -> list[RecognizedSpan]:
        """All non-empty spans from the latest cycle."""
        return list(self._recognized)

    @property
    def detected_texts(self) -> list[RecognizedSpan]:
        """High-confidence spans from the latest cycle, best first."""
        return list(self._detected)

    @property
    def recognition_mode(self) -> RecognitionMode:
        return self._mode

    @property
    def result_count(self) -> int:
        """Number of completed recognition cycles since creation."""
        return self._result_count

    def set_recognition_mode(self, mode: RecognitionMode) -> None:
        """Switch between fast and accurate recognition for later cycles."""
        if mode is not self._mode:
            logger.debug("recognition mode changed", mode=mode.value)
        self._mode = mode

    def add_listener(self, listener: SpanListener) -> None:
        """Register a callback receiving detected spans after each cycle."""
        self._listeners.append(listener)

    def clear(self) -> None:
        """Discard the current results."""
        self._recognized = []
        self._detected = []

    async def process_image(self, image: Any) -> bool:
        """Recognize text in an image and replace the current results.

        Args:
            image: PIL Image or numpy array.

        Returns:
            True if the image was processed, False if the request was
            throttled or recognition failed.
        """
        if self._processing or self._too_soon():
            logger.debug("ocr request throttled")
            return False

        self._processing = True
        mode = self._mode
        start = time.perf_counter()
        try:
            spans = await asyncio.to_thread(self._backend.recognize, image, mode)
        except Exception as e:
            logger.error("ocr failed", mode=mode.value, error=str(e))
            return False
        finally:
            self._processing = False
            self._last_finished = self._clock()

        self._store(spans)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "ocr complete",
            mode=mode.value,
            recognized=len(self._recognized),
            detected=len(self._detected),
            time_ms=elapsed_ms,
        )

        for listener in list(self._listeners):
            listener(self.detected_texts)
        return True

    def _too_soon(self) -> bool:
        if self._last_finished is None or self._min_interval <= 0:
            return False
        return self._clock() - self._last_finished < self._min_interval

    def _store(self, spans: list[RecognizedSpan]) -> None:
        recognized = [span for span in spans if span.text and span.text.strip()]
        detected = [span for span in recognized if span.confidence >= self._confidence_threshold]
        detected.sort(key=lambda span: span.confidence, reverse=True)

        self._recognized = recognized
        self._detected = detected[: self._max_detected]
        self._result_count += 1
