"""Tesseract OCR backend producing normalized text spans."""

from typing import Any, NamedTuple

import numpy as np
from PIL import Image

from ... import log
from ...errors import OCRUnavailableError
from ...languages import Language
from ..base import BoundingBox, OCRBackend, RecognitionMode, RecognizedSpan

logger = log.get_logger("tesseract")

# Map Language enum to Tesseract traineddata names
LANGUAGE_TO_TESSERACT = {
    Language.ENGLISH: "eng",
    Language.KOREAN: "kor",
    Language.JAPANESE: "jpn",
    Language.CHINESE: "chi_sim",
    Language.FRENCH: "fra",
    Language.GERMAN: "deu",
    Language.SPANISH: "spa",
    Language.ITALIAN: "ita",
    Language.PORTUGUESE: "por",
    Language.DUTCH: "nld",
    Language.POLISH: "pol",
    Language.RUSSIAN: "rus",
}

# Page segmentation per mode: sparse text for live frames, automatic layout otherwise
MODE_CONFIG = {
    RecognitionMode.FAST: "--oem 1 --psm 11",
    RecognitionMode.ACCURATE: "--oem 1 --psm 3",
}

# Frames are downscaled to this longest side in FAST mode
FAST_MODE_MAX_SIDE = 1024


class _Word(NamedTuple):
    text: str
    left: int
    top: int
    right: int
    bottom: int
    confidence: float


def to_pil_image(image: Any) -> Image.Image:
    """Convert a camera frame to an RGB PIL image.

    Args:
        image: PIL Image, or numpy array of shape (H, W), (H, W, 3) RGB or
            (H, W, 4) RGBA.

    Returns:
        PIL Image in RGB mode.
    """
    if isinstance(image, Image.Image):
        return image.convert("RGB")

    array = np.asarray(image)
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    if array.ndim == 2:
        return Image.fromarray(array).convert("RGB")
    if array.ndim == 3 and array.shape[2] == 4:
        return Image.fromarray(np.ascontiguousarray(array[:, :, :3]))
    if array.ndim == 3 and array.shape[2] == 3:
        return Image.fromarray(array)
    raise ValueError(f"Unsupported image shape {array.shape}")


class TesseractOCRBackend(OCRBackend):
    """Recognizes text lines with Tesseract.

    Words are grouped into lines; a line's confidence is the mean of its
    word confidences and its box is the union of the word boxes, normalized
    to the image size.
    """

    def __init__(self, languages: list[Language] | None = None):
        """Initialize Tesseract backend.

        Args:
            languages: Languages to recognize. Defaults to English.
        """
        self._languages = languages or [Language.ENGLISH]
        self._tesseract_lang = "+".join(
            LANGUAGE_TO_TESSERACT[language] for language in self._languages
        )
        self._loaded = False

    def load(self) -> None:
        """Verify Tesseract is available.

        Raises:
            OCRUnavailableError: If Tesseract is not installed.
        """
        if self._loaded:
            return

        import pytesseract

        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise OCRUnavailableError(
                "Tesseract OCR is not installed or not in PATH. "
                "Please install Tesseract: https://github.com/tesseract-ocr/tesseract"
            ) from e

        logger.info("tesseract ready", version=str(version), language=self._tesseract_lang)
        self._loaded = True

    def is_loaded(self) -> bool:
        """Check if Tesseract is available."""
        return self._loaded

    def recognize(self, image: Any, mode: RecognitionMode) -> list[RecognizedSpan]:
        """Recognize text lines in an image."""
        if not self._loaded:
            self.load()

        import pytesseract

        pil_image = to_pil_image(image)
        if mode is RecognitionMode.FAST:
            pil_image = self._downscale(pil_image)
        width, height = pil_image.size

        data = pytesseract.image_to_data(
            pil_image,
            lang=self._tesseract_lang,
            config=MODE_CONFIG[mode],
            output_type=pytesseract.Output.DICT,
        )

        rows = zip(
            data["text"], data["conf"], data["block_num"], data["par_num"], data["line_num"],
            data["left"], data["top"], data["width"], data["height"],
        )
        lines: dict[tuple[int, int, int], list[_Word]] = {}
        for text, conf, block, par, line, left, top, w, h in rows:
            text = str(text).strip()
            conf = float(conf)
            # Layout rows carry conf -1
            if not text or conf < 0:
                continue
            lines.setdefault((block, par, line), []).append(
                _Word(text, left, top, left + w, top + h, min(conf / 100.0, 1.0))
            )

        return [_join_line(words, width, height) for words in lines.values()]

    def _downscale(self, image: Image.Image) -> Image.Image:
        longest = max(image.size)
        if longest <= FAST_MODE_MAX_SIDE:
            return image
        scale = FAST_MODE_MAX_SIDE / longest
        size = (max(1, int(image.width * scale)), max(1, int(image.height * scale)))
        return image.resize(size, Image.Resampling.BILINEAR)


def _join_line(words: list[_Word], width: int, height: int) -> RecognizedSpan:
    """Merge the words of one Tesseract line into a span."""
    left = min(word.left for word in words)
    top = min(word.top for word in words)
    right = max(word.right for word in words)
    bottom = max(word.bottom for word in words)
    return RecognizedSpan(
        text=" ".join(word.text for word in words),
        confidence=sum(word.confidence for word in words) / len(words),
        bounding_box=BoundingBox.from_pixels(left, top, right - left, bottom - top, width, height),
    )
