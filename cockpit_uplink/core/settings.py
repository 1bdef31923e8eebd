#!/usr/bin/env python3

"""
Settings for Cockpit-Uplink
Configuration management for the application.
Handles loading, saving, and accessing settings.

Part of the Cockpit-Uplink project.
"""

import json
import os
import logging
from typing import Dict, Any, Optional, List
from pathlib import Path
import dataclasses
from dataclasses import dataclass, field

from cockpit_uplink import constants

logger = logging.getLogger('settings')


@dataclass
class QuerySettings:
    """Remote query settings"""
    timeout: float = constants.QUERY_TIMEOUT  # seconds


@dataclass
class BuilderSettings:
    """Command builder settings"""
    strict_actions: bool = False  # raise on unknown action names
    log_streams: bool = False     # dump outgoing streams at DEBUG


@dataclass
class LogSettings:
    """Logging settings"""
    level: str = "INFO"
    log_to_file: bool = False
    log_file_path: Optional[str] = None
    max_log_files: int = 5
    max_log_size_mb: int = 10


@dataclass
class ApplicationSettings:
    """Main application settings container"""
    query: QuerySettings = field(default_factory=QuerySettings)
    builder: BuilderSettings = field(default_factory=BuilderSettings)
    logging: LogSettings = field(default_factory=LogSettings)
    version: str = "1.0.0"
    first_run: bool = True


class SettingsEncoder(json.JSONEncoder):
    """Custom JSON encoder for dataclasses"""
    def default(self, obj):
        if dataclasses.is_dataclass(obj):
            return dataclasses.asdict(obj)
        return super().default(obj)


def _coerce(current_value: Any, value: Any) -> Any:
    """Convert value to the type of current_value, raising ValueError/TypeError on failure"""
    target_type = type(current_value)
    if target_type is bool and isinstance(value, int):
        # 0=False, non-zero=True
        return bool(value)
    if value is None or current_value is None or isinstance(value, target_type):
        return value
    if target_type is float and isinstance(value, int):
        return float(value)
    return target_type(value)


class Settings:
    """
    Settings manager for Cockpit-Uplink.
    Handles loading, saving, and accessing application settings.
    """
    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_file: Path to configuration file (optional)
        """
        self.settings = ApplicationSettings()

        if config_file:
            self.config_file = config_file
        else:
            self.config_file = os.path.join(
                str(Path.home()),
                '.cockpit_uplink',
                'config.json'
            )

        self.load()

    def load(self, config_file: Optional[str] = None) -> bool:
        """
        Load settings from file. A missing file is created with defaults.

        Args:
            config_file: Override configuration file path

        Returns:
            bool: True if settings were loaded successfully
        """
        if config_file:
            self.config_file = config_file

        try:
            os.makedirs(os.path.dirname(self.config_file), exist_ok=True)

            if not os.path.exists(self.config_file):
                logger.info(f"Configuration file not found at {self.config_file}")
                self._create_default_config()
                return True

            with open(self.config_file, 'r') as f:
                data = json.load(f)

            if not isinstance(data, dict):
                logger.error(f"Config file {self.config_file} does not hold an object")
                return False

            self._update_from_dict(data)

            logger.info(f"Settings loaded from {self.config_file}")
            return True

        except json.JSONDecodeError as e:
            logger.error(f"Error parsing config file: {e}")
            return False

        except OSError as e:
            logger.error(f"Error reading config file: {e}")
            return False

    def save(self, config_file: Optional[str] = None) -> bool:
        """
        Save settings to file.

        Args:
            config_file: Override configuration file path

        Returns:
            bool: True if settings were saved successfully
        """
        if config_file:
            self.config_file = config_file

        try:
            os.makedirs(os.path.dirname(self.config_file), exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(self.settings, f, indent=2, cls=SettingsEncoder)

            logger.info(f"Settings saved to {self.config_file}")
            return True

        except OSError as e:
            logger.error(f"Error writing config file: {e}")
            return False

    def _create_default_config(self) -> None:
        """Create default configuration file."""
        try:
            os.makedirs(os.path.dirname(self.config_file), exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(self.settings, f, indent=2, cls=SettingsEncoder)

            logger.info(f"Default configuration created at {self.config_file}")

        except OSError as e:
            logger.error(f"Error creating default config: {e}")

    def _update_from_dict(self, data: Dict[str, Any]) -> None:
        """
        Update settings from dictionary. Unknown keys are ignored and values
        that cannot be converted keep their current setting.

        Args:
            data: Dictionary with settings data
        """
        def update_dataclass(obj, data_dict):
            for key, value in data_dict.items():
                if not hasattr(obj, key):
                    continue
                current_value = getattr(obj, key)
                if dataclasses.is_dataclass(current_value):
                    if isinstance(value, dict):
                        update_dataclass(current_value, value)
                    else:
                        logger.warning(f"Ignoring non-object value for section {key}")
                    continue
                try:
                    setattr(obj, key, _coerce(current_value, value))
                except (ValueError, TypeError):
                    logger.warning(f"Could not convert {key}={value} to {type(current_value).__name__}")

        update_dataclass(self.settings, data)

        # No longer first run after loading settings
        self.settings.first_run = False

    def get(self, section: str, key: Optional[str] = None) -> Any:
        """
        Get a setting value.

        Args:
            section: Section name (query, builder, logging)
            key: Setting key (if None, returns entire section)

        Returns:
            Setting value or None if not found
        """
        if hasattr(self.settings, section):
            section_obj = getattr(self.settings, section)
            if key is None:
                return section_obj
            elif hasattr(section_obj, key):
                return getattr(section_obj, key)

        return None

    def set(self, section: str, key: str, value: Any) -> bool:
        """
        Set a setting value.

        Args:
            section: Section name (query, builder, logging)
            key: Setting key
            value: New value

        Returns:
            bool: True if setting was changed
        """
        section_obj = getattr(self.settings, section, None)
        if section_obj is None or not dataclasses.is_dataclass(section_obj) or not hasattr(section_obj, key):
            logger.warning(f"Unknown setting {section}.{key}")
            return False

        try:
            setattr(section_obj, key, _coerce(getattr(section_obj, key), value))
            return True
        except (ValueError, TypeError) as e:
            logger.error(f"Error setting {section}.{key}={value}: {e}")
            return False

    def reset_to_defaults(self) -> None:
        """Reset all settings to default values."""
        self.settings = ApplicationSettings()
        logger.info("Settings reset to defaults")

    def apply_logging_settings(self) -> None:
        """Apply logging settings to the Python logging system."""
        log_level = self.settings.logging.level

        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL
        }
        level = level_map.get(str(log_level).upper(), logging.INFO)

        from cockpit_uplink.core.log_config import configure_logging

        configure_logging(
            level=level,
            log_to_file=self.settings.logging.log_to_file,
            log_file_path=self.settings.logging.log_file_path,
            max_log_files=self.settings.logging.max_log_files,
            max_log_size_mb=self.settings.logging.max_log_size_mb
        )

        logger.info(f"Logging level set to {log_level}")

    def validate(self) -> Dict[str, List[str]]:
        """
        Validate settings for consistency and correctness.

        Returns:
            dict: Dictionary of validation errors by section
        """
        errors = {}

        query_errors = []
        timeout = self.settings.query.timeout
        if timeout < constants.QUERY_TIMEOUT_MIN or timeout > constants.QUERY_TIMEOUT_MAX:
            query_errors.append(
                f"Query timeout must be between {constants.QUERY_TIMEOUT_MIN} "
                f"and {constants.QUERY_TIMEOUT_MAX} seconds"
            )
        if query_errors:
            errors["query"] = query_errors

        logging_errors = []
        if self.settings.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logging_errors.append(f"Unknown log level {self.settings.logging.level}")
        if self.settings.logging.log_to_file and not self.settings.logging.log_file_path:
            logging_errors.append("Log file path must be specified when logging to file")
        if self.settings.logging.max_log_files <= 0:
            logging_errors.append("Maximum log files must be positive")
        if self.settings.logging.max_log_size_mb <= 0:
            logging_errors.append("Maximum log size must be positive")
        if logging_errors:
            errors["logging"] = logging_errors

        return errors


# Example usage:
if __name__ == "__main__":
    settings = Settings()

    print("Current Settings:")
    settings_dict = dataclasses.asdict(settings.settings)
    for section, section_settings in settings_dict.items():
        if isinstance(section_settings, dict):
            print(f"\n[{section}]")
            for key, value in section_settings.items():
                print(f"  {key} = {value}")
        else:
            print(f"\n{section} = {section_settings}")

    validation_errors = settings.validate()
    if validation_errors:
        print("\nValidation Errors:")
        for section, errors in validation_errors.items():
            print(f"[{section}]")
            for error in errors:
                print(f"  - {error}")
    else:
        print("\nSettings are valid.")
