"""Kagi API client and MCP tool implementations."""
from .client import KagiAPIError, KagiClient, KagiError, KagiResponseError
from .tools import KagiTools, build_registry

__all__ = [
    "KagiAPIError",
    "KagiClient",
    "KagiError",
    "KagiResponseError",
    "KagiTools",
    "build_registry",
]
