"""
Configuration

Settings for signing, verification and actor key resolution, read from
the environment.
"""

import logging
import os
from datetime import timedelta
from typing import List, Optional

from pydantic import BaseModel

from . import __version__


class VerisigConfig(BaseModel):
    """Top-level configuration model."""
    max_age_hours: float = 12
    max_clock_skew_seconds: Optional[float] = None
    signed_headers: Optional[List[str]] = None
    actor_fetch_timeout: float = 10.0
    user_agent: str = f"verisig/{__version__}"
    log_level: str = "INFO"

    @property
    def max_clock_skew(self) -> Optional[timedelta]:
        if self.max_clock_skew_seconds is None:
            return None
        return timedelta(seconds=self.max_clock_skew_seconds)


def load_config() -> VerisigConfig:
    """
    Load configuration from environment variables.

    Unset variables keep their defaults. ``VERISIG_SIGNED_HEADERS`` is a
    space-separated header list.
    """
    values = {}

    env_map = {
        "VERISIG_MAX_AGE_HOURS": "max_age_hours",
        "VERISIG_MAX_CLOCK_SKEW_SECONDS": "max_clock_skew_seconds",
        "VERISIG_ACTOR_FETCH_TIMEOUT": "actor_fetch_timeout",
        "VERISIG_USER_AGENT": "user_agent",
        "VERISIG_LOG_LEVEL": "log_level",
    }
    for env_name, field in env_map.items():
        value = os.getenv(env_name)
        if value:
            values[field] = value

    signed_headers = os.getenv("VERISIG_SIGNED_HEADERS")
    if signed_headers:
        values["signed_headers"] = signed_headers.split()

    return VerisigConfig(**values)


def configure_logging(level: Optional[str] = None):
    """Configure root logging for processes embedding verisig."""
    logging.basicConfig(level=(level or load_config().log_level).upper())
