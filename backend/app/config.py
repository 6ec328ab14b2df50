from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)
    """Application runtime configuration."""

    app_name: str = "Daily Report Storage"
    environment: str = "development"
    host: str = os.getenv("DR_HOST", "127.0.0.1")
    port: int = int(os.getenv("DR_PORT", "4000"))
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.getenv("DR_CORS_ORIGINS", "http://127.0.0.1:5173,http://localhost:5173").split(",")
            if origin.strip()
        ]
    )

    sqlite_path: Path = Path(os.getenv("DR_SQLITE_PATH", "./data/daily_reports.db"))

    max_reports_per_user: int = int(os.getenv("DR_MAX_REPORTS", "30"))
    default_theme_color: str = os.getenv("DR_DEFAULT_THEME_COLOR", "#70ad47")

    log_level: str = os.getenv("DR_LOG_LEVEL", "INFO")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, list):
            return value
        if not value:
            return []
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


settings = Settings()

# Ensure the database directory exists
settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
