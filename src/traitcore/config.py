"""
Centralized configuration for TraitCore.

Uses Pydantic BaseSettings for environment variable integration
and validation.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (TRAITCORE_*)
3. .env file
4. Default values

Example:
    from traitcore.config import get_config

    config = get_config()
    print(config.log_level)  # From TRAITCORE_LOG_LEVEL or default

    # Override at runtime
    config = get_config(emit_span_events=False)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TraitCoreConfig(BaseSettings):
    """
    Central configuration for TraitCore.

    All settings can be overridden via environment variables
    prefixed with TRAITCORE_.

    Example:
        export TRAITCORE_LOG_LEVEL=debug
        export TRAITCORE_EMIT_SPAN_EVENTS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAITCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for the traitcore logger",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for log pipelines, text for console)",
    )

    # Telemetry
    emit_span_events: bool = Field(
        default=True,
        description="Add composition and context events to the current OTel span",
    )

    # Manifests
    manifest_dir: str = Field(
        default=".",
        description="Base directory for relative composition manifest paths",
    )

    @field_validator("manifest_dir")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ and environment variables in paths."""
        return os.path.expanduser(os.path.expandvars(v))

    def get_manifest_path(self, name: str) -> Path:
        """Resolve a manifest path against ``manifest_dir``."""
        path = Path(name)
        if path.is_absolute():
            return path
        return Path(self.manifest_dir) / path


# Global singleton
_config: Optional[TraitCoreConfig] = None


def get_config(**overrides) -> TraitCoreConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.

    Args:
        **overrides: Override any config values

    Returns:
        TraitCoreConfig instance
    """
    global _config

    if overrides or _config is None:
        _config = TraitCoreConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
