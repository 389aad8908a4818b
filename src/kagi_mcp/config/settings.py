"""Kagi MCP server configuration loading and validation.

Settings come from environment variables (with ``.env`` support via
python-dotenv) or a YAML file, and may be overridden from the command line.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SummarizerEngine = Literal["cecil", "agnes", "daphne", "muriel"]
SUMMARIZER_ENGINES: tuple[str, ...] = ("cecil", "agnes", "daphne", "muriel")
DEFAULT_ENGINE: SummarizerEngine = "cecil"

# Environment variable -> settings field
ENV_VARS = {
    "KAGI_API_KEY": "api_key",
    "KAGI_SUMMARIZER_ENGINE": "summarizer_engine",
    "KAGI_BASE_URL": "base_url",
    "KAGI_SEARCH_API_VERSION": "search_api_version",
    "KAGI_SUMMARIZER_API_VERSION": "summarizer_api_version",
    "KAGI_FASTGPT_API_VERSION": "fastgpt_api_version",
    "KAGI_ENRICH_API_VERSION": "enrich_api_version",
    "KAGI_TIMEOUT": "timeout",
    "KAGI_MAX_RETRIES": "max_retries",
    "KAGI_RETRY_BACKOFF": "retry_backoff",
    "KAGI_LOG_LEVEL": "log_level",
}


class ConfigError(ValueError):
    """Configuration is missing or invalid."""


class KagiSettings(BaseModel):
    """Kagi API credentials and client behaviour."""
    api_key: str = Field(..., description="Kagi API key")
    summarizer_engine: SummarizerEngine = Field(DEFAULT_ENGINE, description="Default summarizer engine")
    base_url: str = Field("https://kagi.com/api", description="Kagi API base URL")
    search_api_version: str = Field("v0", description="Search API version")
    summarizer_api_version: str = Field("v0", description="Universal Summarizer API version")
    fastgpt_api_version: str = Field("v0", description="FastGPT API version")
    enrich_api_version: str = Field("v0", description="Enrichment API version")
    timeout: float = Field(30.0, gt=0, description="HTTP request timeout (seconds)")
    max_retries: int = Field(2, ge=0, le=10, description="Retries for transient HTTP failures")
    retry_backoff: float = Field(1.0, ge=0, description="Base backoff delay (seconds)")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("api_key must not be empty")
        return v

    @field_validator("summarizer_engine", mode="before")
    @classmethod
    def validate_engine(cls, v: Any) -> str:
        if v is None:
            return DEFAULT_ENGINE
        engine = str(v).strip().lower()
        if engine not in SUMMARIZER_ENGINES:
            logger.warning(f"Unknown engine '{v}', defaulting to '{DEFAULT_ENGINE}'")
            return DEFAULT_ENGINE
        return engine

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> KagiSettings:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: str | Path, overrides: dict[str, Any] | None = None) -> KagiSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file
            overrides: Values taking precedence over the file

        Returns:
            Validated KagiSettings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        # Allow the settings to live under a top-level "kagi" key
        if isinstance(data, dict) and "kagi" in data:
            data = data["kagi"]
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {config_path}")

        data = dict(data)
        data.update(_drop_unset(overrides))
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, overrides: dict[str, Any] | None = None, dotenv: bool = True) -> KagiSettings:
        """Load configuration from ``KAGI_*`` environment variables.

        Raises:
            ConfigError: If the API key is missing or a value is invalid
        """
        if dotenv:
            load_dotenv()

        data: dict[str, Any] = {}
        for env_var, field_name in ENV_VARS.items():
            value = os.getenv(env_var)
            if value is not None and value != "":
                data[field_name] = value

        data.update(_drop_unset(overrides))
        if "api_key" not in data:
            raise ConfigError("KAGI_API_KEY must be provided via --api-key or environment variable")
        return cls.from_mapping(data)

    def endpoint(self, version: str, path: str) -> str:
        return f"{self.base_url}/{version}/{path.lstrip('/')}"

    def log_redacted(self) -> dict[str, Any]:
        """Get configuration dict with the API key redacted for logging."""
        config_dict = self.model_dump()
        key = config_dict.get("api_key", "")
        config_dict["api_key"] = f"{key[:4]}***" if len(key) > 8 else "***"
        return config_dict


def _drop_unset(overrides: dict[str, Any] | None) -> dict[str, Any]:
    return {k: v for k, v in (overrides or {}).items() if v is not None}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> KagiSettings:
    """Load settings from a YAML file if given, otherwise from the environment.

    Args:
        config_path: Optional explicit path to config file
        overrides: Values (e.g. from CLI flags) that win over the source; None values are ignored

    Returns:
        Validated KagiSettings instance

    Raises:
        ConfigError: If configuration is invalid or incomplete
    """
    if config_path:
        return KagiSettings.from_yaml(config_path, overrides=overrides)
    return KagiSettings.from_env(overrides=overrides)
