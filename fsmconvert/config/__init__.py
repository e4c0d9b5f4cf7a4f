"""Configuration module for fsmconvert."""

from fsmconvert.config.settings import ConverterConfig, LoggingConfig, load_config

__all__ = ["ConverterConfig", "LoggingConfig", "load_config"]
