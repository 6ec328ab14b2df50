"""Configuration utilities for the desktop application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://127.0.0.1:4000"
DEFAULT_STORAGE = "api"
DEFAULT_DATA_DIR = Path.home() / ".dailyreport"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_AUTOSAVE_MS = 500
DEFAULT_MAX_REPORTS = 30


@dataclass(slots=True)
class AppConfig:
    """Configuration values of the application."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: Optional[str] = None
    storage: str = DEFAULT_STORAGE
    data_dir: Path = DEFAULT_DATA_DIR
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    autosave_ms: int = DEFAULT_AUTOSAVE_MS
    max_reports: int = DEFAULT_MAX_REPORTS
    log_level: str = "INFO"

    @property
    def session_file(self) -> Path:
        return self.data_dir / "session.json"

    @property
    def store_file(self) -> Path:
        return self.data_dir / "reports.json"

    @property
    def autosave_seconds(self) -> float:
        return self.autosave_ms / 1000


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load the configuration from an optional `.env` file and the environment."""

    env_path = env_path or Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    storage = os.getenv("DAILYREPORT_STORAGE", DEFAULT_STORAGE).strip().lower()
    if storage not in {"api", "local"}:
        raise ValueError(f"DAILYREPORT_STORAGE must be 'api' or 'local', not {storage!r}")

    return AppConfig(
        api_base_url=os.getenv("DAILYREPORT_API_BASE_URL", DEFAULT_API_BASE_URL),
        api_token=os.getenv("DAILYREPORT_API_TOKEN"),
        storage=storage,
        data_dir=Path(os.getenv("DAILYREPORT_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser(),
        gemini_api_key=os.getenv("DAILYREPORT_GEMINI_API_KEY") or None,
        gemini_model=os.getenv("DAILYREPORT_GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        autosave_ms=int(os.getenv("DAILYREPORT_AUTOSAVE_MS", DEFAULT_AUTOSAVE_MS)),
        max_reports=int(os.getenv("DAILYREPORT_MAX_REPORTS", DEFAULT_MAX_REPORTS)),
        log_level=os.getenv("DAILYREPORT_LOG_LEVEL", "INFO").upper(),
    )


__all__ = ["AppConfig", "load_config"]
