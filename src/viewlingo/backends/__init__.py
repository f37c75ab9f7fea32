"""Pluggable backends for OCR and translation."""

from .base import (
    BoundingBox,
    OCRBackend,
    RecognitionMode,
    RecognizedSpan,
    TranslationSession,
)
from .model_manager import ModelManager

__all__ = [
    "BoundingBox",
    "OCRBackend",
    "RecognitionMode",
    "RecognizedSpan",
    "TranslationSession",
    "ModelManager",
]
