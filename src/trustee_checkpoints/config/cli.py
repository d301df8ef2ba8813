"""
CLI configuration.

Extends base configuration with command-line specific settings.
"""

from __future__ import annotations

from trustee_checkpoints.config.base import BaseCheckpointSettings, lazy_settings


class CliSettings(BaseCheckpointSettings):
    """Command-line configuration."""

    # Number of hash characters shown in listings
    HASH_DISPLAY_LENGTH: int = 12


# Module-level singleton (lazy-loaded)
settings = lazy_settings(CliSettings)
