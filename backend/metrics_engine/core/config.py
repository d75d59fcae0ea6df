"""
config.py — Centralized Engine Configuration Loader

Purpose:
- Define a single source of truth for engine settings.
- Load and validate environment variables from `.env` or OS environment.

The calculation engine itself is pure; settings only influence:
- Log verbosity
- Whether adjustments naming unknown/derived metrics are rejected or ignored
- Default period labels used by predefined scenarios
- The key that carries the period label in flat input rows

This module does NOT:
- Read metric data.
- Persist scenarios.
"""

from pathlib import Path
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/metrics_engine/core/config.py
# .env should be at: backend/.env
_CONFIG_DIR = Path(__file__).parent
_BACKEND_DIR = _CONFIG_DIR.parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    _ENV_FILE_PATH = str(_ENV_FILE.resolve())
else:
    # pydantic will look in CWD
    _ENV_FILE_PATH = ".env"

MONTH_LABELS: List[str] = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


class Settings(BaseSettings):
    """
    Engine settings container.

    All fields have defaults so the engine can be constructed without any
    environment present (tests, notebooks, embedded use).
    """
    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    STRICT_ADJUSTMENT_TARGETS: bool = Field(
        False,
        description=(
            "Reject adjustments whose target is not a base metric "
            "(default: ignore them silently)"
        ),
    )
    DEFAULT_PERIOD_LABELS: List[str] = Field(
        default_factory=lambda: list(MONTH_LABELS),
        description="Period labels that predefined scenarios are applied to",
    )
    PERIOD_LABEL_KEY: str = Field(
        "month",
        description="Key holding the period label in flat input rows",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case and strip the configured level."""
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return v or "INFO"

    @field_validator("DEFAULT_PERIOD_LABELS")
    @classmethod
    def require_period_labels(cls, v: List[str]) -> List[str]:
        """An empty label list would make every predefined scenario a no-op."""
        labels = [label.strip() for label in v if label and label.strip()]
        if not labels:
            raise ValueError("DEFAULT_PERIOD_LABELS must contain at least one label")
        return labels

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Singleton pattern: settings imported anywhere will reference same object.
settings = Settings()
