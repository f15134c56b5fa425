"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str = Field(...)

    # Model selection per call site
    RELAY_CLASSIFIER_MODEL: str = Field(default="gpt-4o")
    RELAY_HANDLER_MODEL: str = Field(default="gpt-4o-mini")
    RELAY_TRANSLATION_MODEL: str = Field(default="gpt-4o-mini")

    # Each backend call carries its own timeout; the pipeline itself has none.
    RELAY_HANDLER_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)
    RELAY_FAN_OUT_MAX_WORKERS: int = Field(default=8, ge=1)

    # Product policy points
    RELAY_COMPOSITE_ORDER: Literal["commands-first", "queries-first"] = Field(
        default="commands-first"
    )
    RELAY_COMMAND_DOMAIN: Literal["novelty", "console"] = Field(default="novelty")
    RELAY_RESPONSE_LANGUAGE: str | None = Field(default=None)

    RELAY_LOG_LEVEL: str = Field(default="info")
    RELAY_LOG_DIR: Path | None = Field(default=None)
    RELAY_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")

    DATA_DIR: Path = Field(default=Path("/data"))


settings = Settings()  # type: ignore[call-arg]
config = settings  # Alias used by modules that read policy values


__all__ = ["Settings", "settings", "config"]
