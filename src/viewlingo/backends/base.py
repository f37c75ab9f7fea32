"""Abstract base classes and data types for OCR and translation backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..languages import LanguagePair


class RecognitionMode(Enum):
    """Speed/accuracy trade-off requested from the OCR engine."""

    FAST = "fast"
    ACCURATE = "accurate"


@dataclass(frozen=True)
class BoundingBox:
    """Text region location, normalized to the image size (0.0-1.0)."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"BoundingBox.{name} must be within [0, 1], got {value}")

    @classmethod
    def from_pixels(
        cls, x: int, y: int, width: int, height: int, image_width: int, image_height: int
    ) -> "BoundingBox":
        """Normalize a pixel rectangle, clamping it to the image."""
        if image_width <= 0 or image_height <= 0:
            raise ValueError("Image size must be positive")

        def clamp(value: float) -> float:
            return min(max(value, 0.0), 1.0)

        x0 = clamp(x / image_width)
        y0 = clamp(y / image_height)
        x1 = clamp((x + width) / image_width)
        y1 = clamp((y + height) / image_height)
        return cls(x=x0, y=y0, width=max(x1 - x0, 0.0), height=max(y1 - y0, 0.0))


@dataclass(frozen=True)
class RecognizedSpan:
    """A single recognized text region."""

    text: str
    confidence: float
    bounding_box: BoundingBox

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")


class OCRBackend(ABC):
    """Abstract base class for OCR engines."""

    @abstractmethod
    def load(self) -> None:
        """Load or verify the OCR engine.

        Raises:
            OCRUnavailableError: If the engine is not available.
        """
        pass

    @abstractmethod
    def recognize(self, image: Any, mode: RecognitionMode) -> list[RecognizedSpan]:
        """Recognize text regions in an image.

        This call blocks; callers run it in a worker thread.

        Args:
            image: PIL Image or numpy array (H, W), (H, W, 3) or (H, W, 4).
            mode: Requested recognition mode.

        Returns:
            All recognized spans, unfiltered by confidence.
        """
        pass

    @abstractmethod
    def is_loaded(self) -> bool:
        """Check if the engine is ready."""
        pass


class TranslationSession(ABC):
    """A translation channel bound to exactly one language pair.

    Sessions are created by a provider and handed to the session registry;
    the orchestrator only ever calls translate_batch().
    """

    def __init__(self, pair: LanguagePair):
        self._pair = pair

    @property
    def pair(self) -> LanguagePair:
        """The language pair this session translates."""
        return self._pair

    @abstractmethod
    async def translate_batch(self, texts: list[str]) -> list[str]:
        """Translate a batch of texts.

        Args:
            texts: Non-empty source texts.

        Returns:
            Translations in the same order as the input.

        Raises:
            Exception: Any failure; the whole batch is treated as failed.
        """
        pass

    def close(self) -> None:
        """Release resources held by the session."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._pair})"
