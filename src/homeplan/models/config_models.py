"""Configuration models.

``AppConfig`` is persisted as ``config.json`` by the config service.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    """Where tasks are stored."""

    database_path: str | None = Field(
        default=None, description="Path of the SQLite task database (None = data dir)"
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="pretty")  # pretty, table, json, yaml


class UIConfig(BaseModel):
    """UI configuration."""

    timezone: str = Field(default="local")
    user: str = Field(default="me", description="Default completing user")

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("user cannot be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main Homeplan configuration"""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
