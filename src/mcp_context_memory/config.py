"""Configuration for the context memory server.

Each concern gets its own ``BaseSettings`` model with a distinct environment
prefix; ``Settings`` aggregates them and ``settings`` is the process-wide
instance read by the server.
"""

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """MCP transport settings (``MCP_SERVER_*``)."""

    model_config = SettingsConfigDict(env_prefix="MCP_SERVER_", extra="ignore")

    name: str = "context-memory-server"
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class LoggingSettings(BaseSettings):
    """Logging settings (``MCP_LOG_*``)."""

    model_config = SettingsConfigDict(env_prefix="MCP_LOG_", extra="ignore")

    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalise to an upper-case stdlib level name."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{v}'")
        return level


class StatsSettings(BaseSettings):
    """Statistics tracker settings (``MCP_STATS_*``)."""

    model_config = SettingsConfigDict(env_prefix="MCP_STATS_", extra="ignore")

    # Clamp counters at zero (and log) instead of letting them drift negative
    clamp_counters: bool = True


class DebugSettings(BaseSettings):
    """Debug settings (``MCP_DEBUG_*``)."""

    model_config = SettingsConfigDict(env_prefix="MCP_DEBUG_", extra="ignore")

    latency_metrics: bool = False


class Settings(BaseSettings):
    """All settings for the server process."""

    model_config = SettingsConfigDict(extra="ignore")

    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    stats: StatsSettings = Field(default_factory=StatsSettings)
    debug: DebugSettings = Field(default_factory=DebugSettings)


settings = Settings()
