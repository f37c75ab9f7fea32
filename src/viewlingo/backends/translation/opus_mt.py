"""OPUS-MT translation sessions (Helsinki-NLP MarianMT models)."""

import asyncio
import threading

from ... import log
from ...errors import ModelLoadError, SessionUnavailableError
from ...languages import LanguagePair
from ...packs import PACK_CATALOG
from ..base import TranslationSession
from ..model_manager import ModelManager

logger = log.get_logger("opus-mt")

MAX_LENGTH = 256
NUM_BEAMS = 4


class OpusMTSession(TranslationSession):
    """Translates batches for one language pair with an OPUS-MT model.

    The model must already be installed in the Hugging Face cache (packs are
    installed by a separate subsystem). It is loaded lazily on the first
    batch; inference runs in a worker thread so the event loop stays free.
    """

    def __init__(
        self,
        pair: LanguagePair,
        repo_id: str | None = None,
        manager: ModelManager | None = None,
    ):
        """Initialize the session.

        Args:
            pair: Language pair to translate.
            repo_id: Model repository. Defaults to the pack catalog entry.
            manager: Model manager used to locate the installed model.

        Raises:
            SessionUnavailableError: If no model is known for the pair.
        """
        super().__init__(pair)
        self._repo_id = repo_id or PACK_CATALOG.get(pair)
        if not self._repo_id:
            raise SessionUnavailableError(pair.source, pair.target, "no OPUS-MT model for this pair")

        self._manager = manager or ModelManager()
        self._model = None
        self._tokenizer = None
        self._load_lock = threading.Lock()

    @property
    def repo_id(self) -> str:
        return self._repo_id

    def load(self) -> None:
        """Load tokenizer and model from the local cache.

        Raises:
            ModelLoadError: If the model is not installed or fails to load.
        """
        with self._load_lock:
            if self._model is not None:
                return

            model_path = self._manager.get_model_path(self._repo_id)
            if model_path is None:
                raise ModelLoadError(f"Language pack {self._repo_id} is not installed")

            logger.info("loading opus-mt", pair=str(self.pair), repo=self._repo_id)
            try:
                from transformers import MarianMTModel, MarianTokenizer

                self._tokenizer = MarianTokenizer.from_pretrained(str(model_path))
                self._model = MarianMTModel.from_pretrained(str(model_path))
            except Exception as e:
                raise ModelLoadError(f"Failed to load {self._repo_id}: {e}") from e

            logger.info("opus-mt ready", pair=str(self.pair))

    def is_loaded(self) -> bool:
        """Check if the model is loaded."""
        return self._model is not None

    async def translate_batch(self, texts: list[str]) -> list[str]:
        """Translate a batch of texts in a worker thread."""
        if not texts:
            return []
        return await asyncio.to_thread(self._translate_sync, texts)

    def _translate_sync(self, texts: list[str]) -> list[str]:
        if self._model is None:
            self.load()

        inputs = self._tokenizer(texts, return_tensors="pt", padding=True, truncation=True)
        outputs = self._model.generate(**inputs, max_length=MAX_LENGTH, num_beams=NUM_BEAMS)
        return [
            self._tokenizer.decode(output, skip_special_tokens=True).strip()
            for output in outputs
        ]

    def close(self) -> None:
        """Drop the loaded model."""
        with self._load_lock:
            self._model = None
            self._tokenizer = None
