"""
Configuration settings for flashdeck.

Uses Pydantic Settings for environment variable management with .env file support.
Every setting can be overridden with a FLASHDECK_* environment variable.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLASHDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Deck Storage
    # ========================================
    decks_dir: Path = Field(
        default=Path("decks"),
        description="Root directory holding one sub-directory per topic",
    )
    questions_filename: str = Field(
        default="questions.txt",
        description="Per-topic file with one question per line",
    )
    answers_filename: str = Field(
        default="answers.txt",
        description="Per-topic file with one answer per line",
    )

    # ========================================
    # Session Transcripts
    # ========================================
    transcripts_dir: Path = Field(
        default=Path("."),
        description="Directory receiving end-of-session transcripts",
    )
    transcript_prefix: str = Field(
        default="flashcard_responses",
        description="File name prefix for transcripts (timestamp is appended)",
    )

    # ========================================
    # Terminal UI
    # ========================================
    poll_interval_ms: int = Field(
        default=100,
        ge=1,
        description="Idle wait between input polls",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/flashdeck.log",
        description="Log file path (None disables file logging)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
