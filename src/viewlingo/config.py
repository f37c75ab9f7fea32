"""Configuration management for ViewLingo."""

import os
from pathlib import Path

import yaml

from .backends.base import RecognitionMode
from .languages import parse_language

CONFIG_ENV_VAR = "VIEWLINGO_CONFIG"

DEFAULT_CONFIG = """# Language to translate into
target_language: "en"

# Language of the recognized text; leave empty to detect it per text
source_language:

# OCR confidence threshold (0.0-1.0)
# Spans below this are recognized but not used for translation
ocr_confidence: 0.7

# Maximum number of detected spans kept per frame
max_detected_texts: 10

# Seconds to wait after a frame before accepting the next one
ocr_min_interval: 0.25

# Recognition mode: "fast" (live camera) or "accurate" (still photos)
recognition_mode: accurate

# Translation cache size and entry lifetime in seconds (empty = no expiry)
cache_size: 1000
cache_ttl:

# Minimum language detection confidence (0.0-1.0)
detection_confidence: 0.5

# Log level: DEBUG, INFO, WARNING, ERROR
log_level: INFO
"""


class Config:
    """Application configuration."""

    def __init__(
        self,
        target_language: str = "en",
        source_language: str | None = None,
        ocr_confidence: float = 0.7,
        max_detected_texts: int = 10,
        ocr_min_interval: float = 0.25,
        recognition_mode: RecognitionMode = RecognitionMode.ACCURATE,
        cache_size: int = 1000,
        cache_ttl: float | None = None,
        detection_confidence: float = 0.5,
        log_level: str = "INFO",
    ):
        self.target_language = target_language
        self.source_language = source_language
        self.ocr_confidence = ocr_confidence
        self.max_detected_texts = max_detected_texts
        self.ocr_min_interval = ocr_min_interval
        self.recognition_mode = recognition_mode
        self.cache_size = cache_size
        self.cache_ttl = cache_ttl
        self.detection_confidence = detection_confidence
        self.log_level = log_level

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Build a configuration from parsed YAML.

        Raises:
            ValueError: If a value is out of range or a language is unknown.
        """
        target = data.get("target_language") or "en"
        source = data.get("source_language") or None
        for key, code in (("target_language", target), ("source_language", source)):
            if code is not None and parse_language(code) is None:
                raise ValueError(f"Unsupported language for {key}: {code}")

        ocr_confidence = float(data.get("ocr_confidence", 0.7))
        detection_confidence = float(data.get("detection_confidence", 0.5))
        for key, value in (("ocr_confidence", ocr_confidence), ("detection_confidence", detection_confidence)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{key} must be between 0 and 1, got {value}")

        cache_ttl = data.get("cache_ttl")
        return cls(
            target_language=target,
            source_language=source,
            ocr_confidence=ocr_confidence,
            max_detected_texts=int(data.get("max_detected_texts", 10)),
            ocr_min_interval=float(data.get("ocr_min_interval", 0.25)),
            recognition_mode=RecognitionMode(str(data.get("recognition_mode", "accurate")).lower()),
            cache_size=int(data.get("cache_size", 1000)),
            cache_ttl=float(cache_ttl) if cache_ttl is not None else None,
            detection_confidence=detection_confidence,
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. If None, the path in
                $VIEWLINGO_CONFIG is used, then viewlingo.yml in the working
                directory, then ~/.viewlingo/config.yml.

        Returns:
            Config instance with loaded values. When no file exists, the
            defaults are returned and written to ~/.viewlingo/config.yml.
        """
        candidates = [Path(config_path)] if config_path else _search_paths()
        found = next((path for path in candidates if path.is_file()), None)
        if found is not None:
            data = yaml.safe_load(found.read_text(encoding="utf-8")) or {}
            return cls.from_dict(data)

        _write_default_config(_home_config_path())
        return cls()


def _home_config_path() -> Path:
    return Path.home() / ".viewlingo" / "config.yml"


def _search_paths() -> list[Path]:
    paths = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path).expanduser())
    paths.append(Path("viewlingo.yml"))
    paths.append(_home_config_path())
    return paths


def _write_default_config(path: Path) -> None:
    """Write the commented default config unless a file already exists."""
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG, encoding="utf-8")
