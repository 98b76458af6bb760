"""newswall configuration (environment settings + JSON image config)."""

from __future__ import annotations

import json
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from newswall.core.exceptions import ConfigError
from newswall.core.paths import PROJECT_ROOT

# Load .env file into environment variables
env_path = PROJECT_ROOT / ".env"
load_dotenv(env_path)

DEFAULT_TEXT_MODEL = "gpt-4.1"


class Settings(BaseSettings):
    """Process-wide settings read from the environment (and .env)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Prompt refinement + OpenAI image provider
    openai_api_key: str | None = Field(default=None)
    openai_model: str | None = Field(default=None)

    # Gemini image generation
    gemini_api_key: str | None = Field(default=None)
    gemini_model: str | None = Field(default=None)

    # Primary generative provider: "gemini" or "openai"
    image_provider: str = Field(default="gemini")

    # Desktop + output
    desktop_env: str = Field(default="cinnamon")
    output_dir: str = Field(default="output")
    image_config_file: str = Field(default="image.config.json")

    # Logs
    attempt_log_file: str = Field(default="logs/image-requests.log")
    log_file: str = Field(default="logs/newswall.log")
    debug: bool = Field(default=False)

    # Per-call HTTP timeout (the core itself imposes no deadline)
    http_timeout_s: float = Field(default=60.0)

    @field_validator("desktop_env", "image_provider")
    @classmethod
    def lower(cls, v: str) -> str:
        return v.strip().lower()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class KeywordConfig(_CamelModel):
    """Keyword extraction knobs."""

    min_length: int = Field(default=4, ge=1)
    max: int = Field(default=10, ge=1)


class Resolution(_CamelModel):
    """Target wallpaper size in pixels."""

    width: int = Field(default=2560, gt=0)
    height: int = Field(default=1440, gt=0)


class ImageConfig(_CamelModel):
    """Contents of image.config.json (camelCase keys on disk)."""

    feeds: list[str] = Field(default_factory=list)
    keywords: KeywordConfig = Field(default_factory=KeywordConfig)
    style: str = ""
    vibe: str = ""
    negative: str = ""
    artist_hints: list[str] = Field(default_factory=list)
    style_pool: list[str] = Field(default_factory=list)
    resolution: Resolution = Field(default_factory=Resolution)
    gemini_model: str | None = None
    openai_text_model: str | None = None


def load_image_config(path: str | Path) -> ImageConfig:
    """Load and validate the JSON image config.

    Args:
        path: Path to image.config.json

    Returns:
        Validated ImageConfig

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    p = Path(path)
    try:
        with open(p, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Image config not found: {p}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Image config is not valid JSON ({p}): {e}") from e

    try:
        return ImageConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Image config invalid ({p}): {e}") from e


def resolve_gemini_model(settings: Settings, cfg: ImageConfig) -> str | None:
    """GEMINI_MODEL env var wins over the config file's geminiModel."""
    return settings.gemini_model or cfg.gemini_model


def resolve_text_model(settings: Settings, cfg: ImageConfig) -> str:
    """Config file's openaiTextModel, then OPENAI_MODEL, then the default."""
    return cfg.openai_text_model or settings.openai_model or DEFAULT_TEXT_MODEL


def load_settings() -> Settings:
    """Read Settings from the environment.

    Raises:
        ConfigError: If an environment value fails validation
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid environment settings: {e}") from e
