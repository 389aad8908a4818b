"""Configuration management for the Kagi MCP server."""
from .settings import (
    DEFAULT_ENGINE,
    SUMMARIZER_ENGINES,
    ConfigError,
    KagiSettings,
    load_settings,
)

__all__ = [
    "DEFAULT_ENGINE",
    "SUMMARIZER_ENGINES",
    "ConfigError",
    "KagiSettings",
    "load_settings",
]
