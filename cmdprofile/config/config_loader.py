"""
Configuration loader for profiling runs.

This module loads ProfilerConfig from an optional YAML file, applies an
environment-specific override file and finally command-line overrides.
"""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from cmdprofile.config.profiler_config import ProfilerConfig
from cmdprofile.exceptions import ConfigError

DEFAULT_CONFIG_FILE = "cmdprofile.yaml"

_FLOAT_FIELDS = ("interval", "baseline", "guard", "gpu_timeout")


class ConfigLoader:

    def __init__(
        self,
        config_path: Optional[Path] = None,
        env: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        cwd: Optional[Path] = None,
    ):
        """
        Args:
            config_path: Explicit config file; must exist when given
            env: Environment name, loads <stem>_<env>.yaml next to the base file
            overrides: Values from the command line; None entries are ignored
            cwd: Directory searched for the default config file (default: cwd)
        """
        self.config_path = config_path
        self.env = env
        self.overrides = overrides or {}
        self.cwd = cwd or Path.cwd()
        self.config_data = self._load_config()

    def _load_config(self) -> ProfilerConfig:
        """
        Load and validate the configuration.
        Supports environment-specific overrides via <stem>_<env>.yaml

        Returns:
            ProfilerConfig: Validated configuration

        Raises:
            ConfigError: On unreadable files, unknown keys or invalid values
        """
        base_config_file = self.config_path or self.cwd / DEFAULT_CONFIG_FILE

        data: Dict[str, Any] = {}
        if base_config_file.is_file():
            data.update(self._read_yaml(base_config_file))
        elif self.config_path is not None:
            raise ConfigError(f"Config file not found: {base_config_file}")

        # Load environment-specific override if specified
        if self.env:
            env_config_file = base_config_file.with_name(
                f"{base_config_file.stem}_{self.env}{base_config_file.suffix}")
            if not env_config_file.is_file():
                raise ConfigError(f"Environment config file not found: {env_config_file}")
            # dict.update() overwrites existing keys
            data.update(self._read_yaml(env_config_file))

        data.update({k: v for k, v in self.overrides.items() if v is not None})

        config = ProfilerConfig(**self._coerce(data))
        config.validate()
        return config

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(data) - set(ProfilerConfig.field_names()))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        result = dict(data)
        for key in _FLOAT_FIELDS:
            if key not in result:
                continue
            value = result[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{key} must be a number, got {value!r}")
            result[key] = float(value)

        if "gpu_enabled" in result and not isinstance(result["gpu_enabled"], bool):
            raise ConfigError(f"gpu_enabled must be true or false, got {result['gpu_enabled']!r}")

        if "log_file" in result:
            result["log_file"] = Path(result["log_file"])

        return result
