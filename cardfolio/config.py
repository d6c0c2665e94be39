"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Secrets stay out of source code; the .env file is gitignored.

Pydantic Settings resolves each field in this order:
  1. Environment variables (highest priority)
  2. .env file values
  3. Defaults defined here (lowest priority)

Usage:
    from cardfolio.config import settings
    print(settings.SLUG_LENGTH)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the Cardfolio API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Used to sign JWT tokens
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Cardfolio API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    # SQLite for MVP; swap to a PostgreSQL (asyncpg) URL for production
    DATABASE_URL: str = "sqlite+aiosqlite:///./cardfolio.db"

    # --- Authentication ---
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    # One week, same lifetime as the old session cookie
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:5173"]

    # --- Public links ---
    # Base URL printed on NFC tags and shown in share dialogs
    PUBLIC_BASE_URL: str = "http://localhost:5173"
    SLUG_LENGTH: int = 10
    BATCH_SUFFIX_LENGTH: int = 8
    DEVICE_ID_LENGTH: int = 21
    SLUG_MAX_ATTEMPTS: int = 5
    BATCH_MAX_COUNT: int = 1000

    # --- Bootstrap admin ---
    # Created at startup when all three are set and the username is free
    BOOTSTRAP_ADMIN_USERNAME: str | None = None
    BOOTSTRAP_ADMIN_EMAIL: str | None = None
    BOOTSTRAP_ADMIN_PASSWORD: str | None = None


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
