"""Process-level configuration for the agent.

Configuration is loaded from:
- environment variables prefixed with ``INSIGHTS_OPERATOR_``
- and a local `.env` file (if present)

The service URL and the cluster identifier are required; everything else has a
usable default. A missing required value is the only condition that stops the
agent from starting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentSettings(BaseSettings):
    """Settings for the operator agent.

    Environment variables:
    - INSIGHTS_OPERATOR_URL
    - INSIGHTS_OPERATOR_CLUSTER
    - INSIGHTS_OPERATOR_CONFIG_INTERVAL   (optional)
    - INSIGHTS_OPERATOR_TRIGGER_INTERVAL  (optional)
    - INSIGHTS_OPERATOR_CONFIGFILE        (optional)
    - INSIGHTS_OPERATOR_LOG_LEVEL         (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `AgentSettings(_env_file=path_to_env)`.
    """

    # Defaults are empty so `AgentSettings()` type-checks; the validator below
    # enforces that both are provided.
    url: str = Field(
        default="",
        description="Base URL of the remote control service",
    )
    cluster: str = Field(
        default="",
        description="Cluster identifier used to scope configuration and triggers",
    )

    config_interval: int = Field(
        default=10,
        ge=1,
        description="Delay (seconds) between configuration polls",
    )
    trigger_interval: int = Field(
        default=10,
        ge=1,
        description="Delay (seconds) between trigger polls",
    )

    configfile: Path | None = Field(
        default=None,
        description="Optional JSON file holding the bootstrap configuration",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logging level (case-insensitive)",
    )

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout (seconds) applied to every request to the control service",
    )

    status_host: str = Field(
        default="127.0.0.1",
        description="Bind address of the status API (serve command only)",
    )
    status_port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port of the status API (serve command only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="INSIGHTS_OPERATOR_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _require_service_and_cluster(self) -> AgentSettings:
        if not self.url.strip():
            raise ValueError("INSIGHTS_OPERATOR_URL is required")
        if not self.cluster.strip():
            raise ValueError("INSIGHTS_OPERATOR_CLUSTER is required")
        return self

    @property
    def service_url(self) -> str:
        """Base URL without a trailing slash."""

        return self.url.strip().rstrip("/")
