"""
Shared configuration management for the authorization engine.
"""

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DenialMode(str, Enum):
    """How a negative decision is surfaced by authorize."""
    RESPOND = "respond"
    RAISE = "raise"


class CanConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CAN_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Enforcement
    not_auth: Optional[str] = Field(default=None, description="Process-wide redirect target on denial")
    denial_mode: DenialMode = Field(default=DenialMode.RESPOND)

    # Action resolution / entity loading
    id_param: str = Field(default="id", description="Path parameter carrying the resource identifier")


class ServiceConfig(CanConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(**overrides) -> CanConfig:
    """Get engine configuration."""
    return CanConfig(**overrides)


def get_service_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
