"""
Configuration loader for YAML files.

Handles locating, loading, validation and merging of the project
configuration over the built-in defaults.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from .defaults import get_default_config
from .models import ReadinessConfig

CONFIG_FILENAMES = ["readiness.yaml", "readiness.yml"]
CONFIG_ENV_VAR = "READINESS_CONFIG"


class ConfigError(Exception):
    """Configuration loading or validation error."""
    pass


class ConfigLoader:
    """
    Loads and validates configuration.

    Lookup order:
    1. Explicit path passed to the loader
    2. READINESS_CONFIG environment variable
    3. readiness.yaml / readiness.yml in the project root
    4. Built-in defaults only
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        project_root: Optional[Union[str, Path]] = None,
        environ: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the config loader.

        Args:
            config_path: Path to a config file
            project_root: Directory searched for a config file
            environ: Environment mapping (defaults to os.environ)
        """
        self.config_path = Path(config_path) if config_path else None
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.environ = os.environ if environ is None else environ
        self.source: Optional[Path] = None

    def locate(self) -> Optional[Path]:
        """Find the configuration file to use, if any."""
        if self.config_path is not None:
            if not self.config_path.is_file():
                raise ConfigError(f"Configuration file does not exist: {self.config_path}")
            return self.config_path

        env_path = self.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)
            if not path.is_file():
                raise ConfigError(f"{CONFIG_ENV_VAR} points to a missing file: {path}")
            return path

        for filename in CONFIG_FILENAMES:
            candidate = self.project_root / filename
            if candidate.is_file():
                return candidate
        return None

    def load(self) -> ReadinessConfig:
        """
        Load the configuration.

        Returns:
            Validated configuration

        Raises:
            ConfigError: If the file is unreadable or invalid
        """
        data = get_default_config()

        self.source = self.locate()
        if self.source is not None:
            data = merge_config(data, self._read_yaml(self.source))

        try:
            return ReadinessConfig(**data)
        except ValidationError as e:
            origin = self.source or "defaults"
            raise ConfigError(f"Invalid configuration in {origin}: {e}")

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML file."""
        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{file_path} must contain a mapping at the top level")
        return data


def merge_config(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge user configuration over the defaults.

    Top-level keys replace the default value, except 'profiles', which are
    merged by profile name.
    """
    merged = dict(defaults)
    for key, value in overrides.items():
        if key == "profiles" and isinstance(value, dict):
            profiles = dict(defaults.get("profiles", {}))
            profiles.update(value)
            merged["profiles"] = profiles
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    project_root: Optional[Union[str, Path]] = None,
) -> ReadinessConfig:
    """Shortcut for ConfigLoader(...).load()."""
    return ConfigLoader(config_path, project_root).load()
