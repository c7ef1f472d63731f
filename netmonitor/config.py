"""Configuration loading for the netmonitor system.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
- Convert settings into the core's MonitorConfig value
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from netmonitor.core.models import MonitorConfig

# Largest payload that fits an unfragmented IPv4 packet on a 1500-byte MTU
MAX_PAYLOAD_BYTES = 1472


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Targets
    external_host: str = Field(
        default="www.google.com",
        description="External host probed to test the Internet path",
    )

    # Incident output
    output_path: str = Field(
        default="out.log",
        description="Append-only incident log file",
    )

    # Probe configuration
    ping_timeout_ms: int = Field(
        default=1000,
        description="Timeout for a single echo request in milliseconds",
    )
    ping_payload: str = Field(
        default="a" * 32,
        description="ASCII payload carried by each echo request",
    )
    dont_fragment: bool = Field(
        default=True,
        description="Set the IP don't-fragment flag on echo requests",
    )
    echo_backend: Literal["system", "ping3"] = Field(
        default="system",
        description="Echo transport: system ping binary or ping3 library",
    )
    ping_binary: str = Field(
        default="ping",
        description="Ping executable used by the system echo backend",
    )

    # Sampling and evaluation cadence
    ping_interval_ms: int = Field(
        default=100,
        description="Sampling interval between tick starts in milliseconds",
    )
    latency_threshold_ms: float = Field(
        default=120,
        description="External round trip time above which a sample is an incident",
    )
    evaluation_interval_multiplier: int = Field(
        default=100,
        description="Evaluation interval as a multiple of the sampling interval",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["daemon", "once"] = Field(
        default="daemon",
        description="Run continuously, or take one sample and exit",
    )

    @field_validator("external_host", "output_path")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Ensure host and path are not blank."""
        if not v or not v.strip():
            raise ValueError("must be a non-empty string")
        return v.strip()

    @field_validator("ping_timeout_ms", "ping_interval_ms")
    @classmethod
    def validate_positive_ms(cls, v: int) -> int:
        """Ensure timing values are positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("latency_threshold_ms")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Ensure latency threshold is non-negative."""
        if v < 0:
            raise ValueError("latency_threshold_ms must be non-negative")
        return v

    @field_validator("evaluation_interval_multiplier")
    @classmethod
    def validate_multiplier(cls, v: int) -> int:
        """Ensure evaluation multiplier is positive."""
        if v <= 0:
            raise ValueError("evaluation_interval_multiplier must be positive")
        return v

    @field_validator("ping_payload")
    @classmethod
    def validate_payload(cls, v: str) -> str:
        """Ensure payload is ASCII and fits an unfragmented packet."""
        if not v:
            raise ValueError("ping_payload must not be empty")
        if not v.isascii():
            raise ValueError("ping_payload must be ASCII")
        if len(v) > MAX_PAYLOAD_BYTES:
            raise ValueError(f"ping_payload must be at most {MAX_PAYLOAD_BYTES} bytes")
        return v

    def to_monitor_config(self) -> MonitorConfig:
        """Build the core's immutable configuration value."""
        return MonitorConfig(
            external_host=self.external_host,
            probe_timeout_ms=self.ping_timeout_ms,
            sampling_interval_ms=self.ping_interval_ms,
            latency_threshold_ms=self.latency_threshold_ms,
            evaluation_interval_multiplier=self.evaluation_interval_multiplier,
            payload=self.ping_payload.encode("ascii"),
            dont_fragment=self.dont_fragment,
        )


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
