"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from doc_structurer.utils.config import (
    DEFAULT_TESSDATA_PREFIX,
    AppConfig,
    ConfigurationError,
    LLMConfig,
    OCRConfig,
    load_config,
)


class TestOCRConfig:
    """Tests for OCRConfig defaults and tessdata resolution."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.default_lang == "eng"
        assert cfg.psm == 3
        assert cfg.pdf_dpi == 300
        assert cfg.pdf_ocr_fallback is False
        assert cfg.tesseract_cmd is None

    def test_tessdata_default(self) -> None:
        assert OCRConfig().resolve_tessdata_prefix() == DEFAULT_TESSDATA_PREFIX

    def test_tessdata_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TESSDATA_PREFIX", "/opt/tessdata")
        assert OCRConfig().resolve_tessdata_prefix() == "/opt/tessdata"

    def test_tessdata_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TESSDATA_PREFIX", "/opt/tessdata")
        cfg = OCRConfig(tessdata_prefix="/srv/tessdata")
        assert cfg.resolve_tessdata_prefix() == "/srv/tessdata"


class TestLLMConfig:
    """Tests for the completion-provider settings."""

    def test_defaults(self) -> None:
        cfg = LLMConfig()
        assert cfg.model == "gpt-4o"
        assert cfg.api_url.endswith("/chat/completions")
        assert cfg.api_key is None

    def test_missing_key_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            LLMConfig().require_api_key()
        assert LLMConfig().is_configured is False

    def test_blank_key_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            LLMConfig(api_key="   ").require_api_key()

    def test_key_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert LLMConfig().require_api_key() == "sk-env"
        assert LLMConfig().is_configured is True

    def test_config_key_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert LLMConfig(api_key="sk-file").require_api_key() == "sk-file"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_default_config(self, project_root: Path) -> None:
        cfg = load_config(project_root / "configs" / "config.yaml")
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"
        assert cfg.llm.model == "gpt-4o"

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert isinstance(cfg, AppConfig)
        assert cfg.log_level == "INFO"

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "ocr": {"default_lang": "fin", "pdf_ocr_fallback": True},
            "llm": {"model": "gpt-4o-mini", "api_key": "sk-yaml"},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.ocr.default_lang == "fin"
        assert cfg.ocr.pdf_ocr_fallback is True
        assert cfg.llm.model == "gpt-4o-mini"
        assert cfg.llm.require_api_key() == "sk-yaml"
        assert cfg.log_level == "DEBUG"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert isinstance(load_config(config_file), AppConfig)
