"""
Runtime settings and logging setup.

Settings come from ``TIMETABLER_``-prefixed environment variables or a
local ``.env`` file. Command-line options override them per run.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Default paths, log level and seed, read from TIMETABLER_* variables or .env."""

    model_config = SettingsConfigDict(env_prefix="TIMETABLER_", env_file=".env", extra="ignore")

    roster_path: Path = Path("roster.json")
    templates_path: Path = Path("templates.json")
    log_level: str = "WARNING"
    seed: Optional[int] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "WARNING") -> None:
    """Route package logs through a rich handler."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
