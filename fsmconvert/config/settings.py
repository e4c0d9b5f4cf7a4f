"""Configuration for fsmconvert.

Defaults can be overridden by a YAML file, ``fsmconvert.yaml`` in the
configuration directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from fsmconvert.bindings import MACHINE_SUFFIX, Format, list_formats, parse_format
from fsmconvert.errors import ConfigError

CONFIG_FILE = "fsmconvert.yaml"

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "text")


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "warning"
    format: str = "text"


@dataclass
class ConverterConfig:
    """Complete converter configuration."""

    default_format: str = Format.OBJCX.value
    suspensible: bool = True
    machine_suffix: str = MACHINE_SUFFIX
    templates_dir: Optional[Path] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> ConverterConfig:
        """
        Load configuration from a YAML file.

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError("path", f"Configuration file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError("yaml", f"Failed to parse YAML: {e}") from e
        except OSError as e:
            raise ConfigError("file", f"Failed to read config file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("yaml", "Top level must be a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConverterConfig:
        """
        Create configuration from a dictionary.

        Raises:
            ConfigError: If the resulting configuration is invalid
        """
        logging_data = data.get("logging") or {}
        logging_config = LoggingConfig(
            level=str(logging_data.get("level", "warning")),
            format=str(logging_data.get("format", "text")),
        )

        templates_dir = data.get("templates_dir")
        config = cls(
            default_format=str(data.get("default_format", Format.OBJCX.value)),
            suspensible=bool(data.get("suspensible", True)),
            machine_suffix=str(data.get("machine_suffix", MACHINE_SUFFIX)),
            templates_dir=Path(templates_dir) if templates_dir else None,
            logging=logging_config,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: On the first invalid value
        """
        if parse_format(self.default_format) is None:
            raise ConfigError(
                "default_format",
                f"Unknown format '{self.default_format}'. Known: {', '.join(list_formats())}",
            )

        if not self.machine_suffix.startswith("."):
            raise ConfigError(
                "machine_suffix",
                f"Must start with '.', got {self.machine_suffix!r}",
            )

        if self.logging.level.lower() not in LOG_LEVELS:
            raise ConfigError(
                "logging.level",
                f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level!r}",
            )
        if self.logging.format.lower() not in LOG_FORMATS:
            raise ConfigError(
                "logging.format",
                f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format!r}",
            )

        if self.templates_dir is not None and not self.templates_dir.is_dir():
            raise ConfigError(
                "templates_dir",
                f"Templates directory not found: {self.templates_dir}",
            )

    def with_overrides(self, **overrides: Any) -> ConverterConfig:
        """Return a copy with the given non-None values replaced."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def load_config(config_dir: Optional[Path] = None) -> ConverterConfig:
    """
    Load configuration from the standard location.

    Reads ``<config_dir>/fsmconvert.yaml`` if present, defaults otherwise.

    Args:
        config_dir: Configuration directory (defaults to the current directory)

    Raises:
        ConfigError: If the configuration file is invalid
    """
    config_dir = Path(config_dir) if config_dir is not None else Path(".")

    path = config_dir / CONFIG_FILE
    if path.exists():
        return ConverterConfig.from_yaml(path)

    config = ConverterConfig()
    config.validate()
    return config
