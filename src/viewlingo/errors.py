"""Exceptions raised by ViewLingo backends and providers.

The orchestration layer does not let these escape a batch call: they are
caught at the pair/text seam and logged. They reach callers only when a
backend is used directly.
"""


class ViewLingoError(Exception):
    """Base class for all ViewLingo errors."""


class SessionUnavailableError(ViewLingoError):
    """A translation session could not be created for a language pair."""

    def __init__(self, source: str, target: str, reason: str = ""):
        self.source = source
        self.target = target
        self.reason = reason
        message = f"No translation session available for {source} -> {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ModelLoadError(ViewLingoError):
    """A translation or OCR model failed to load."""


class OCRUnavailableError(ViewLingoError):
    """The OCR engine is not installed or cannot be started."""
