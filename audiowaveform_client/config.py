"""
Configuration management for the audiowaveform client
"""
import copy
import os
import yaml
from typing import Dict, Any, Optional

from .errors import ConfigError


class Config:
    """Application configuration: defaults < YAML file < CLI arguments"""

    DEFAULT_CONFIG = {
        'binary_name': 'audiowaveform',
        # Directory or full path of the binary; skips discovery when set
        'binary_path': None,
        # How to discover the binary: 'whereis' or 'which'
        'locator': 'whereis',
        'timeout': 120,
        'log_level': None,
        # Default option values, keyed by WaveformOptions field name
        'options': {},
    }

    NESTED_KEYS = ('options',)

    def __init__(self, config_file: Optional[str] = None):
        """
        Args:
            config_file: Path to a YAML configuration file (optional)
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file and os.path.exists(config_file):
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str) -> None:
        """
        Load configuration from a YAML file

        Args:
            config_file: Path to the configuration file
        """
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading the configuration file: {e}") from e

        if not file_config:
            return
        if not isinstance(file_config, dict):
            raise ConfigError("Error loading the configuration file: top level must be a mapping")

        for key, value in file_config.items():
            if key in self.NESTED_KEYS and value is not None and not isinstance(value, dict):
                raise ConfigError(
                    f"Error loading the configuration file: '{key}' must be a mapping, "
                    f"got {type(value).__name__}"
                )
            if key in self.NESTED_KEYS and isinstance(value, dict):
                self.config.setdefault(key, {})
                self._deep_merge(self.config[key], value)
            else:
                self.config[key] = value

    def _deep_merge(self, base: dict, update: dict) -> None:
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def update_from_args(self, args: Dict[str, Any]) -> None:
        """
        Update the configuration from CLI arguments, which take precedence
        over the file. ``None`` values never override.
        """
        for key, value in args.items():
            if value is not None:
                self.config[key] = value

    def update_options(self, options: Dict[str, Any]) -> None:
        """Merge CLI-provided option values over the configured ones."""
        current = self.config.get('options')
        if current is None:
            current = self.config['options'] = {}
        elif not isinstance(current, dict):
            raise ConfigError(f"'options' must be a mapping, got {type(current).__name__}")
        for key, value in options.items():
            if value is not None and value is not False:
                current[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        """Returns a deep copy of the whole configuration"""
        return copy.deepcopy(self.config)
