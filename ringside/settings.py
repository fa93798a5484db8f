"""
ringside.settings
=================

Configuration settings for the Ringside rule engine.

This module provides centralized configuration options that can be used across
the package.  It includes default values that can be overridden via
environment variables or a local ``.env`` file.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Logging settings
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("RINGSIDE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get(
    "RINGSIDE_LOG_FORMAT",
    "%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Roster settings
# ---------------------------------------------------------------------------
STRICT_ROSTER = os.environ.get("RINGSIDE_STRICT_ROSTER", "True").lower() == "true"


# ---------------------------------------------------------------------------
# Pydantic settings model for business rules
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Pydantic model for rule-engine settings, loaded from environment variables."""

    # Stable composition
    stable_min_members: int = Field(
        default=3,
        ge=0,
        description="Minimum weighted member count before a stable may debut or be activated",
    )
    tag_team_member_weight: int = Field(
        default=2,
        ge=1,
        description="How many members a tag team counts for inside a stable",
    )

    # Employment
    release_notice_days: int = Field(
        default=0,
        ge=0,
        description="Days of notice that must be served before a release (0 disables the check)",
    )

    log_level: str = Field(default=LOG_LEVEL, description="Root log level for the ringside logger")

    class Config:
        """Configuration for the settings model."""
        env_prefix = "RINGSIDE_"
        env_file = ".env"  # load from .env file if present
        case_sensitive = False  # case-insensitive environment variables


# Initialize settings
settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the root logger for scripts and notebooks.

    The library itself only creates module loggers; call this once from an
    application entry point.  *level* defaults to ``settings.log_level``.
    """
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
