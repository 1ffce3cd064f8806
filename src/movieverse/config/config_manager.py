"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..utils.exceptions import ConfigurationError
from .models import Config

CONFIG_ENV_VAR = "MOVIEVERSE_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "backend": {
        "base_url": "${MOVIEVERSE_BACKEND_URL}",
        "timeout": 15,
        "with_credentials": True,
    },
    "view": {
        "default_sort": "",
    },
    "logging": {
        "level": "INFO",
    },
}


def candidate_paths() -> List[Path]:
    """Locations searched for a configuration file, in priority order."""
    paths = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".config" / "movieverse" / "config.yaml",
        Path.home() / ".movieverse" / "config.yaml",
    ]
    env_config = os.getenv(CONFIG_ENV_VAR)
    if env_config:
        paths.insert(0, Path(env_config))
    return paths


class ConfigManager:
    """Loads, caches and validates the application configuration.

    The file is read once; ``${VAR}`` references are expanded against the
    environment, optionally after loading a ``.env`` file.
    """

    def __init__(self, config_path: Optional[Path] = None, load_env: bool = True):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file. If None, searches standard locations.
            load_env: Load a ``.env`` file into the environment before expansion.
        """
        self._config_path = config_path
        self._config: Optional[Config] = None
        self._load_env = load_env

    @property
    def config_path(self) -> Optional[Path]:
        """Explicit configuration path, if one was given."""
        return self._config_path

    def load_config(self) -> Config:
        """Load and validate configuration.

        Returns:
            Validated configuration object.

        Raises:
            FileNotFoundError: If configuration file is not found.
            ConfigurationError: If the file cannot be parsed or is invalid.
        """
        if self._config is None:
            if self._load_env:
                load_dotenv()
            self._config = self._parse(self._find_config_file())
        return self._config

    def reload_config(self) -> Config:
        """Drop the cached configuration and read the file again."""
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Current configuration, loaded on first use."""
        return self.load_config()

    def validate_config_file(self, config_path: Path) -> Optional[str]:
        """Check a configuration file without making it current.

        Args:
            config_path: Path to configuration file to validate.

        Returns:
            None if the file is valid, otherwise a description of the problem.
        """
        try:
            self._parse(config_path)
        except (ConfigurationError, OSError) as e:
            return str(e)
        return None

    def _find_config_file(self) -> Path:
        """Resolve the configuration file.

        Raises:
            FileNotFoundError: If no configuration file is found.
        """
        if self._config_path is not None:
            if self._config_path.exists():
                return self._config_path
            raise FileNotFoundError(f"Configuration file not found: {self._config_path}")

        search_paths = candidate_paths()
        for path in search_paths:
            if path.exists():
                return path

        raise FileNotFoundError(
            f"Configuration file not found in any of these locations: "
            f"{[str(p) for p in search_paths]}"
        )

    @staticmethod
    def _parse(path: Path) -> Config:
        """Read, expand and validate one YAML file.

        Raises:
            ConfigurationError: If the YAML is malformed or fails validation.
        """
        with open(path, "r", encoding="utf-8") as f:
            content = os.path.expandvars(f.read())

        try:
            raw_config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"YAML file {path} must contain a mapping at root level")

        try:
            return Config(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    @classmethod
    def create_default_config(cls, output_path: Path, base_url: Optional[str] = None) -> None:
        """Write a starter configuration file.

        Args:
            output_path: Path where to create the configuration file.
            base_url: Backend URL to write. Defaults to an environment placeholder.
        """
        default_config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
        if base_url:
            default_config["backend"]["base_url"] = base_url

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(default_config, f, default_flow_style=False, indent=2)
