"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cart_store.exceptions import ConfigurationError
from cart_store.models.config import DEFAULT_STORAGE_KEY, StoreConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    @property
    def default_data_dir(self) -> str:
        return str(self.config_file_path.parent)

    def load_config(self, overrides: dict[str, Any] | None = None) -> StoreConfig:
        """
        Loads configuration from the INI file, applies overrides, and validates it.

        Args:
            overrides: A dictionary of options provided via the command line.

        Returns:
            A validated StoreConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'cart-store init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if self._migrate_if_needed():
            log.info(
                "[yellow]Configuration file was updated with new default values."
                "[/yellow]"
            )

        try:
            config_from_file = self._get_config_as_dict()
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e

        if overrides:
            config_from_file.update(overrides)

        try:
            return StoreConfig(
                **config_from_file, config_path=str(self.config_file_path.parent)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save.
        """
        config = configparser.ConfigParser()
        config["DEFAULT"] = {}

        defaults = self._defaults()
        for key in sorted(StoreConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key, None))
            if isinstance(value, bool):
                config["DEFAULT"][key] = "true" if value else "false"
            elif value is not None:
                config["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _defaults(self) -> StoreConfig:
        return StoreConfig.model_construct(
            data_dir=self.default_data_dir,
            config_path=self.default_data_dir,
        )

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        return {
            "backend": section.get("backend", "file"),
            "data_dir": section.get("data_dir", self.default_data_dir),
            "storage_key": section.get("storage_key", DEFAULT_STORAGE_KEY),
            "validate_qty": section.getboolean("validate_qty", False),
            "event_log": section.getboolean("event_log", False),
        }

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = self._defaults()
        needs_saving = False

        config_section = self._parser["DEFAULT"]

        for key in sorted(StoreConfig.get_ini_keys()):
            if key not in config_section:
                default_value = getattr(defaults, key)
                if isinstance(default_value, bool):
                    config_section[key] = "true" if default_value else "false"
                else:
                    config_section[key] = str(default_value)

                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
