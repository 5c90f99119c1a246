"""
Configuration Manager

Handles hierarchical configuration loading, validation, and management
with support for CLI args → environment variables → config files → defaults.
"""

import os
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from pydantic import ValidationError

from imgbatch.core.config.models import AppConfig
from imgbatch.core.exceptions import ConfigurationError, ErrorCode


class ConfigManager:
    """
    Manages application configuration with hierarchical loading and validation.

    Configuration sources in order of precedence:
    1. CLI arguments (highest priority)
    2. Environment variables
    3. Configuration files
    4. Default values (lowest priority)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._config_paths = self._get_default_config_paths()

    def _get_default_config_paths(self) -> List[Path]:
        """Get default configuration file search paths."""
        search_paths = [
            Path.cwd() / "imgbatch.yaml",
            Path.cwd() / "imgbatch.yml",
            Path.cwd() / ".imgbatch.yaml",
            Path.cwd() / ".imgbatch.yml",
            Path.home() / ".config" / "imgbatch" / "config.yaml",
        ]

        xdg_config = os.environ.get('XDG_CONFIG_HOME')
        if xdg_config:
            search_paths.append(Path(xdg_config) / "imgbatch" / "config.yaml")

        return search_paths

    def load_config(
        self,
        cli_args: Optional[Dict[str, Any]] = None,
        env_prefix: str = "IMGBATCH_"
    ) -> AppConfig:
        """
        Load and validate configuration from all sources.

        Args:
            cli_args: Dictionary of CLI arguments
            env_prefix: Prefix for environment variables

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_data = {}

        file_config = self._load_config_file()
        if file_config:
            config_data.update(file_config)

        env_config = self._load_env_config(env_prefix)
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        if cli_args:
            cli_config = self._normalize_cli_args(cli_args)
            config_data = self._deep_merge(config_data, cli_config)

        try:
            self._config = AppConfig(**config_data)
            return self._config
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}",
                error_code=ErrorCode.CONFIG_SCHEMA_VALIDATION,
                cause=e
            ) from e

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        config_file = self.config_file

        if config_file and not config_file.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {config_file}",
                error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                config_key="config_file",
                config_value=str(config_file)
            )

        if not config_file:
            for path in self._config_paths:
                if path.exists() and path.is_file():
                    config_file = path
                    break

        if not config_file:
            return None

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (IOError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config file {config_file}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_file} must contain a mapping at the top level",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT
            )
        return data

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config = {}

        env_mappings = {
            f"{prefix}TARGET_FORMAT": ("conversion", "target_format", str),
            f"{prefix}MAX_WORKERS": ("conversion", "max_workers", int),

            f"{prefix}OUTPUT_DIR": ("output", "output_dir", str),
            f"{prefix}ARCHIVE_NAME": ("output", "archive_name", str),
            f"{prefix}WRITE_ARCHIVE": ("output", "write_archive", self._parse_bool),
            f"{prefix}WRITE_INDIVIDUAL": ("output", "write_individual", self._parse_bool),
            f"{prefix}OVERWRITE": ("output", "overwrite", self._parse_bool),

            f"{prefix}DRY_RUN": ("dry_run", None, self._parse_bool),
            f"{prefix}VERBOSE": ("verbose", None, self._parse_bool),
            f"{prefix}DEBUG": ("debug", None, self._parse_bool),
        }

        for env_var, (section, key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    parsed_value = parser(value)
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(
                        f"Invalid value for {env_var}: {value} ({e})",
                        error_code=ErrorCode.CONFIG_INVALID_VALUE,
                        config_key=env_var,
                        config_value=value
                    ) from e
                if key is None:
                    env_config[section] = parsed_value
                else:
                    env_config.setdefault(section, {})[key] = parsed_value

        return env_config

    def _normalize_cli_args(self, cli_args: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize CLI arguments to configuration structure."""
        normalized = {}

        cli_mappings = {
            'dry_run': 'dry_run',
            'verbose': 'verbose',
            'debug': 'debug',

            'to': ('conversion', 'target_format'),
            'target_format': ('conversion', 'target_format'),
            'workers': ('conversion', 'max_workers'),

            'output': ('output', 'output_dir'),
            'archive_name': ('output', 'archive_name'),
            'archive': ('output', 'write_archive'),
            'individual': ('output', 'write_individual'),
            'overwrite': ('output', 'overwrite'),
        }

        for cli_key, value in cli_args.items():
            if value is None:
                continue

            mapping = cli_mappings.get(cli_key)
            if mapping:
                if isinstance(mapping, tuple):
                    section, key = mapping
                    normalized.setdefault(section, {})[key] = value
                else:
                    normalized[mapping] = value

        return normalized

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _parse_bool(value: Union[str, bool]) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in {'true', '1', 'yes', 'on', 'enabled'}
        return bool(value)

    def validate_config(self, config: Optional[AppConfig] = None) -> List[str]:
        """
        Validate configuration and return list of warnings.

        Args:
            config: Configuration to validate (uses loaded config if None)

        Returns:
            List of validation warnings
        """
        if config is None:
            config = self._config

        if config is None:
            return ["No configuration loaded"]

        warnings = []

        if not config.output.write_archive and not config.output.write_individual and not config.dry_run:
            warnings.append("Neither the archive nor individual files will be written")

        output_dir = config.output.output_dir
        if output_dir.exists() and not output_dir.is_dir():
            warnings.append(f"Output path exists and is not a directory: {output_dir}")

        return warnings

    def create_example_config(self, output_file: Path) -> None:
        """
        Create example configuration file.

        Args:
            output_file: Path to write configuration file
        """
        config_dict = AppConfig().model_dump(mode='json')

        with open(output_file, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    @property
    def config(self) -> Optional[AppConfig]:
        """Get the loaded configuration."""
        return self._config
