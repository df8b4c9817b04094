"""Configuration management for the staff payroll engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _log_level(name: str) -> str:
    """Normalize a logging level name; unknown names fall back to INFO."""
    level = name.strip().upper()
    if level not in logging.getLevelNamesMapping():
        return "INFO"
    return level


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    rules_version: str
    rules_path: str | None
    engine_version: str
    log_level: str

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            rules_version=os.getenv("PAYROLL_RULES_VERSION", "KE-2024"),
            rules_path=os.getenv("PAYROLL_RULES_PATH") or None,
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            log_level=_log_level(os.getenv("LOG_LEVEL", "INFO")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
