"""
Artiffex - Configuration Settings
Gemini / Imagen model selection, generation defaults, graph policy and logging.
"""

import logging
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Artiffex platform settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field(default="dev", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # ── Google Gemini / Imagen ────────────────────────────────────────
    google_api_key: Optional[str] = Field(default=None, alias="GOOGLE_API_KEY")
    image_model: str = "imagen-3.0-generate-002"
    text_model: str = "gemini-2.5-flash"
    image_mime_type: str = "image/png"

    # ── Generation Defaults ───────────────────────────────────────────
    default_aspect_ratio: str = "1:1"
    animation_max_frames: int = 24

    # ── Graph Policy ──────────────────────────────────────────────────
    # When true, add_node with an unknown parent raises instead of creating a root.
    strict_parents: bool = Field(default=False, alias="ARTIFFEX_STRICT_PARENTS")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = ["dev", "development", "test", "prod"]
        if v.lower() not in allowed:
            logger.warning(f"[SETTINGS] environment '{v}' not in {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{v}'")
        return level


settings = Settings()
