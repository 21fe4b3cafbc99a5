# app/shared/config.py
import os
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "Grammar Lens"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.CONSOLE

    # --- Lexicon ---
    # Relative paths are resolved against the repository root.
    LEXICON_DIR: str = os.path.join("data", "lexicon")
    LEXICON_LANG: str = "en"

    # --- Server ---
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # --- Rendering ---
    PLACEHOLDER: str = "___"
    INCOMPLETE_MARKER: str = "[incomplete]"
    FACT_MARKER: str = "⊨"

    # How long a determiner reset reason stays visible (seconds)
    RESET_REASON_TTL_SEC: float = 1.0

    # Number of render results a session keeps for diffing
    DERIVATION_HISTORY: int = 2

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
