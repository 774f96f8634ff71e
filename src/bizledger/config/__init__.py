"""Configuration for bizledger."""

from bizledger.config.settings import Settings, load_settings
from bizledger.config.logging import configure_logging

__all__ = ["Settings", "load_settings", "configure_logging"]
