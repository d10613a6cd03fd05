"""Configuration management for the document structuring service.

Loads YAML configuration into pydantic models. The completion-provider
credential may come from the YAML file or from ``OPENAI_API_KEY``; it is
checked once at startup rather than discovered missing on the first call.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_TESSDATA_PREFIX = "/usr/share/tesseract-ocr/4.00/tessdata/"
DEFAULT_CONFIG_PATH = Path("configs/config.yaml")
API_KEY_ENV = "OPENAI_API_KEY"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or unusable."""


class OCRConfig(BaseModel):
    """Settings for Tesseract OCR and PDF handling."""

    tesseract_cmd: str | None = None
    tessdata_prefix: str | None = None
    default_lang: str = "eng"
    psm: int = 3
    pdf_dpi: int = 300
    pdf_ocr_fallback: bool = False

    def resolve_tessdata_prefix(self) -> str:
        """Return the tessdata directory: config, then env, then the default."""
        return (
            self.tessdata_prefix
            or os.environ.get("TESSDATA_PREFIX")
            or DEFAULT_TESSDATA_PREFIX
        )


class LLMConfig(BaseModel):
    """Settings for the chat-completion provider."""

    api_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4o"
    api_key: str | None = None

    def require_api_key(self) -> str:
        """Return the bearer credential.

        Raises:
            ConfigurationError: If neither the config nor the environment
                provides a non-empty key.
        """
        key = self.api_key or os.environ.get(API_KEY_ENV)
        if not key or not key.strip():
            raise ConfigurationError(
                f"No completion API key configured; set llm.api_key or {API_KEY_ENV}"
            )
        return key.strip()

    @property
    def is_configured(self) -> bool:
        try:
            self.require_api_key()
        except ConfigurationError:
            return False
        return True


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration. A missing file yields defaults.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
