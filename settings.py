"""
Configuration for the wellness questionnaire.

Uses Pydantic Settings; values come from the environment or a local .env file.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    SECRET_KEY: str = Field(default="replace-this-with-a-random-value")
    LOG_LEVEL: str = Field(default="INFO")
    DEFAULT_LANGUAGE: str = Field(default="both")

    # Supabase (PostgREST) storage
    SUPABASE_URL: Optional[str] = Field(default=None)
    SUPABASE_ANON_KEY: Optional[str] = Field(default=None)
    SUPABASE_TABLE: str = Field(default="questionnaire_responses")
    REQUEST_TIMEOUT: float = Field(default=10.0)

    # Devanagari-capable TTF for PDF export; Helvetica is used when missing
    PDF_FONT_DIR: Path = Field(default=BASE_DIR / "fonts")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root_logger.handlers:
        return
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(console_handler)
