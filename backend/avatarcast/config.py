from __future__ import annotations
"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """avatarcast application settings.

    Loaded from environment variables or .env file.
    """

    # --- Application ---
    APP_NAME: str = "avatarcast"
    DEBUG: bool = False

    # --- Remote video API ---
    VIDEO_API_BASE: str = "https://api.synthesia.io/v2"
    VIDEO_API_TIMEOUT: float = 30.0
    VIDEO_VISIBILITY: str = "public"
    VIDEO_TEST_MODE: bool = False  # test renders are watermarked but free

    # --- Request defaults (substituted for empty fields) ---
    DEFAULT_TITLE: str = "My Synthesia Video"
    DEFAULT_DESCRIPTION: str = "Created via Figma Plugin"
    DEFAULT_SCRIPT: str = "Hello! This is a video generated directly from Figma."
    DEFAULT_AVATAR: str = "anna_costume1_cameraA"
    DEFAULT_BACKGROUND: str = "green_screen"

    # --- Polling ---
    POLL_INTERVAL: float = 5.0
    POLL_TIMEOUT: float = 1800.0  # 0 disables the bound

    # --- Asset download / commit ---
    DOWNLOAD_TIMEOUT: float = 120.0
    PLACEHOLDER_WIDTH: float = 400.0
    PLACEHOLDER_HEIGHT: float = 225.0
    PLACEHOLDER_NAME: str = "Synthesia Video"
    DEGRADED_NOTICE_TIMEOUT_MS: int = 5000

    # --- Credential storage ---
    CREDENTIAL_BACKEND: str = "redis"  # redis | memory
    CREDENTIAL_KEY: str = "synthesia_api_key"
    REDIS_URL: str = "redis://localhost:6379/0"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
