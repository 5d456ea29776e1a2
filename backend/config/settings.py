from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loads all environment variables into a single, accessible object."""
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"

    DATABASE_URL: str = "sqlite+aiosqlite:///./fact_checks.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    RATE_LIMIT_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0
    MAX_PAYLOAD_BYTES: int = 10000

    # Degraded verdicts come from an outage, not from the model.
    CACHE_DEGRADED_VERDICTS: bool = False

    @property
    def GEMINI_ENDPOINT(self) -> str:
        return f"{self.GEMINI_BASE_URL}/v1beta/models/{self.GEMINI_MODEL}:generateContent"


@lru_cache
def get_settings() -> Settings:
    return Settings()
