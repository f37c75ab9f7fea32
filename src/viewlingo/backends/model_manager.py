"""Inspection of translation models installed in the Hugging Face cache.

Packs are installed by an external subsystem; this module only answers
whether a pack's model files are present locally. It never downloads.
"""

import os
from pathlib import Path

from huggingface_hub import snapshot_download
from huggingface_hub.constants import HF_HUB_CACHE
from huggingface_hub.utils import LocalEntryNotFoundError

from .. import log

logger = log.get_logger("models")

# Suppress HuggingFace Hub warnings
os.environ["HF_HUB_DISABLE_IMPLICIT_TOKEN"] = "1"
os.environ["HF_HUB_VERBOSITY"] = "error"


class ModelManager:
    """Answers installation questions about Hugging Face model repositories."""

    def __init__(self, cache_dir: str | Path | None = None):
        """Initialize the model manager.

        Args:
            cache_dir: Hugging Face hub cache directory. Defaults to the
                standard location (~/.cache/huggingface/hub).
        """
        self._cache_dir = Path(cache_dir) if cache_dir is not None else Path(HF_HUB_CACHE)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def get_hf_cache_path(self, repo_id: str) -> Path:
        """Get the cache directory for a repository.

        Args:
            repo_id: Repository ID (e.g., "org/model-name").

        Returns:
            Path to the cache directory for this repo.
        """
        # HuggingFace stores repos as: <cache>/models--org--repo/
        repo_folder = "models--" + repo_id.replace("/", "--")
        return self._cache_dir / repo_folder

    def get_model_path(self, repo_id: str) -> Path | None:
        """Get the local snapshot path of an installed repository.

        Args:
            repo_id: Repository ID.

        Returns:
            Snapshot directory, or None if the repository is not installed.
        """
        try:
            return Path(
                snapshot_download(
                    repo_id=repo_id,
                    cache_dir=str(self._cache_dir),
                    local_files_only=True,
                )
            )
        except LocalEntryNotFoundError:
            return None

    def is_installed(self, repo_id: str) -> bool:
        """Check if a repository is fully present in the local cache."""
        installed = self.get_model_path(repo_id) is not None
        logger.debug("model install check", repo=repo_id, installed=installed)
        return installed

    def get_size_on_disk(self, repo_id: str) -> int:
        """Get the total size of a cached repository in bytes (0 if absent)."""
        cache_path = self.get_hf_cache_path(repo_id)
        if not cache_path.exists():
            return 0

        total_size = 0
        for file_path in cache_path.rglob("*"):
            if file_path.is_file():
                total_size += file_path.stat().st_size
        return total_size
