"""ViewLingo - camera text translation core.

Recognized text from a camera frame is translated per language pair through
registered translation sessions, with a shared cache in front of them.
"""

__version__ = "0.1.0"

from .cache import TranslationCache
from .detection import LanguageDetector
from .languages import Language, LanguagePair
from .ocr import OCRService, RecognitionMode, RecognizedSpan
from .orchestrator import TranslationOrchestrator
from .packs import LanguagePackRegistry, PackStatus
from .pipeline import CameraTranslator
from .sessions import SessionProvider, SessionRegistry

__all__ = [
    "CameraTranslator",
    "Language",
    "LanguageDetector",
    "LanguagePackRegistry",
    "LanguagePair",
    "OCRService",
    "PackStatus",
    "RecognitionMode",
    "RecognizedSpan",
    "SessionProvider",
    "SessionRegistry",
    "TranslationCache",
    "TranslationOrchestrator",
    "__version__",
]
