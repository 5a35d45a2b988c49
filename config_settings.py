from __future__ import annotations
import logging
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Galaxy
    GALAXY_URL: str = "https://usegalaxy.org"
    GALAXY_API_KEY: str = ""
    GALAXY_TIMEOUT: float = 60.0

    # Uploads
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024
    HISTORY_NAME: str = "AMRFinder Analysis"

    # API
    PORT: int = 3001
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    LOG_LEVEL: str = "INFO"

    @property
    def masked_api_key(self) -> str:
        return f"{self.GALAXY_API_KEY[:8]}..." if self.GALAXY_API_KEY else "<unset>"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_cors_config(settings: Settings | None = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return {
        "allow_origins": settings.CORS_ORIGINS,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization", "X-API-KEY"],
    }


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
