"""Tests for configuration loading."""

from unittest.mock import patch

import pytest
import yaml

from viewlingo.backends.base import RecognitionMode
from viewlingo.config import DEFAULT_CONFIG, Config


class TestFromDict:
    """Tests for Config.from_dict."""

    def test_defaults(self):
        config = Config.from_dict({})
        assert config.target_language == "en"
        assert config.source_language is None
        assert config.ocr_confidence == 0.7
        assert config.max_detected_texts == 10
        assert config.recognition_mode is RecognitionMode.ACCURATE
        assert config.cache_size == 1000
        assert config.cache_ttl is None

    def test_default_file_matches_defaults(self):
        config = Config.from_dict(yaml.safe_load(DEFAULT_CONFIG))
        defaults = Config()
        assert vars(config) == vars(defaults)

    def test_values(self):
        config = Config.from_dict({
            "target_language": "ko",
            "source_language": "en-US",
            "recognition_mode": "FAST",
            "cache_ttl": 60,
            "log_level": "debug",
        })
        assert config.target_language == "ko"
        assert config.source_language == "en-US"
        assert config.recognition_mode is RecognitionMode.FAST
        assert config.cache_ttl == 60.0
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "data",
        [
            {"target_language": "xx"},
            {"source_language": "klingon"},
            {"ocr_confidence": 1.5},
            {"detection_confidence": -0.1},
            {"recognition_mode": "turbo"},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(ValueError):
            Config.from_dict(data)


class TestLoad:
    """Tests for Config.load."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "viewlingo.yml"
        path.write_text("target_language: ja\nocr_confidence: 0.8\n", encoding="utf-8")

        config = Config.load(str(path))

        assert config.target_language == "ja"
        assert config.ocr_confidence == 0.8

    def test_empty_file(self, tmp_path):
        path = tmp_path / "viewlingo.yml"
        path.write_text("", encoding="utf-8")
        assert Config.load(str(path)).target_language == "en"

    def test_default_created(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("VIEWLINGO_CONFIG", raising=False)
        with patch("pathlib.Path.home", return_value=tmp_path):
            config = Config.load()

        assert config.target_language == "en"
        created = tmp_path / ".viewlingo" / "config.yml"
        assert created.read_text(encoding="utf-8") == DEFAULT_CONFIG

    def test_working_directory_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("VIEWLINGO_CONFIG", raising=False)
        (tmp_path / "viewlingo.yml").write_text("target_language: fr\n", encoding="utf-8")
        with patch("pathlib.Path.home", return_value=tmp_path):
            assert Config.load().target_language == "fr"

    def test_env_var_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "viewlingo.yml").write_text("target_language: fr\n", encoding="utf-8")
        custom = tmp_path / "custom.yml"
        custom.write_text("target_language: de\n", encoding="utf-8")
        monkeypatch.setenv("VIEWLINGO_CONFIG", str(custom))

        assert Config.load().target_language == "de"

    def test_existing_home_file_not_overwritten(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("VIEWLINGO_CONFIG", raising=False)
        home_config = tmp_path / ".viewlingo" / "config.yml"
        home_config.parent.mkdir()
        home_config.write_text("target_language: ko\n", encoding="utf-8")

        with patch("pathlib.Path.home", return_value=tmp_path):
            assert Config.load().target_language == "ko"
        assert home_config.read_text(encoding="utf-8") == "target_language: ko\n"
