"""
Shared Kernel Presentation Configuration.

Tunes the shared presentation utilities from the environment, e.g.::

    SHARED_KERNEL_API_RESPONSE__ENABLED=false
    SHARED_KERNEL_META_DEFAULTS__VERSION=v1
    SHARED_KERNEL_META_DEFAULTS__ENVIRONMENT=staging

Settings are frozen once loaded.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiResponseSettings(BaseModel):
    """Automatic envelope wrapping of controller responses."""
    enabled: bool = Field(default=True)
    model_config = ConfigDict(frozen=True)


class MetaDefaults(BaseModel):
    """Values copied into the ``meta`` section of every envelope."""
    version: str | None = Field(default=None, description="Logical API version, e.g. v1")
    environment: str | None = Field(default=None, description="Deployment label, e.g. staging")
    model_config = ConfigDict(frozen=True)


class PresentationSettings(BaseSettings):
    """Shared presentation layer configuration."""
    api_response: ApiResponseSettings = Field(default_factory=ApiResponseSettings)
    meta_defaults: MetaDefaults = Field(default_factory=MetaDefaults)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    debug: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="SHARED_KERNEL_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    @staticmethod
    def load() -> PresentationSettings:
        """Load settings from environment."""
        return PresentationSettings()
