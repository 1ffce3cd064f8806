"""Configuration management module."""

from .config_manager import ConfigManager
from .models import BackendConfig, Config, LoggingConfig, ViewConfig

__all__ = [
    "ConfigManager",
    "Config",
    "BackendConfig",
    "ViewConfig",
    "LoggingConfig",
]
