# config.py
import logging
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    database_url: str = Field(default="sqlite+aiosqlite:///./employee_management.db")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")
    db_echo: bool = Field(default=False)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance built from the environment."""
    defaults = Settings.model_fields
    return Settings(
        database_url=os.getenv("DATABASE_URL", defaults["database_url"].default),
        host=os.getenv("HOST", defaults["host"].default),
        port=int(os.getenv("PORT", defaults["port"].default)),
        api_prefix=os.getenv("API_PREFIX", defaults["api_prefix"].default),
        log_level=os.getenv("LOG_LEVEL", defaults["log_level"].default),
        db_echo=os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes"),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
