"""Configuration service for managing Homeplan configuration.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and saving config.json
- Dot-separated get/set of individual settings
- Resolving the task database location and the user's "today"
"""

from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tzlocal
from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from homeplan.models.config_models import AppConfig

_APP_NAME = "homeplan"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        return self._config

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (None if unknown)."""
        value: Any = self.config
        for part in key.split("."):
            if not isinstance(value, BaseModel) or part not in type(value).model_fields:
                return None
            value = getattr(value, part)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not name a setting
            ValueError: If the value fails validation
        """
        if not self._has_key(key):
            raise KeyError(f"Unknown configuration key: {key}")

        data = self.config.model_dump()
        parts = key.split(".")
        current = data
        for part in parts[:-1]:
            current = current[part]
        current[parts[-1]] = value

        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            details = "; ".join(error["msg"] for error in e.errors())
            raise ValueError(f"Invalid value for {key}: {details}") from e
        self.save_config()

    def _has_key(self, key: str) -> bool:
        parent_key, _, field = key.rpartition(".")
        parent = self.get(parent_key) if parent_key else self.config
        return isinstance(parent, BaseModel) and field in type(parent).model_fields

    @property
    def database_path(self) -> Path:
        """Location of the SQLite task database."""
        configured = self.config.storage.database_path
        if configured:
            return Path(configured).expanduser()
        return self.data_dir / "homeplan.db"

    def timezone(self):
        """Timezone used to decide what "today" is."""
        name = self.config.ui.timezone
        if name == "local":
            return tzlocal.get_localzone()
        try:
            return ZoneInfo(name)
        except ZoneInfoNotFoundError as e:
            raise RuntimeError(f"Unknown timezone in config: {name}") from e

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        return datetime.now(self.timezone()).date()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
