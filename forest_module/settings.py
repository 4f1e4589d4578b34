# /combine_models/forest_module/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}

# loguru built-in levels
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class Settings:
    """Runtime knobs, read from the environment (a .env file is loaded by the CLI)."""
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"
    echo_header: bool = True
    # unknown COMBINE_MODELS_LOG_LEVEL value replaced by the default, reported once logging is up
    rejected_log_level: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        level = os.getenv("COMBINE_MODELS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        rejected = None
        if level not in LOG_LEVELS:
            rejected, level = level, DEFAULT_LOG_LEVEL
        return cls(
            log_level=level,
            rejected_log_level=rejected,
            log_file=os.getenv("COMBINE_MODELS_LOG_FILE") or None,
            log_rotation=os.getenv("COMBINE_MODELS_LOG_ROTATION", "10 MB"),
            log_retention=os.getenv("COMBINE_MODELS_LOG_RETENTION", "7 days"),
            echo_header=_env_flag("COMBINE_MODELS_ECHO_HEADER", True),
        )
