"""Configuration loader with YAML parsing and environment variable substitution."""

import yaml
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional
from .models import ExporterConfig
from .settings import Settings


class ConfigLoader:
    """Load and validate exporter configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> ExporterConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        The file holds the exporter options under an ``exporter:`` key.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ExporterConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If configuration validation fails
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        raw_config = ConfigLoader._substitute_env_vars(raw_config)

        return ConfigLoader.from_mapping(raw_config.get("exporter") or {})

    @staticmethod
    def from_mapping(values: Dict[str, Any]) -> ExporterConfig:
        """
        Validate a plain mapping of exporter options.

        Args:
            values: Field name to value

        Returns:
            ExporterConfig: Validated configuration object
        """
        return ExporterConfig(**values)

    @staticmethod
    def resolve(
        config_path: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> ExporterConfig:
        """
        Merge every configuration source.

        Precedence, highest first: CLI flags, config file, environment,
        built-in defaults.

        Args:
            config_path: Optional YAML file
            cli_overrides: Options given on the command line (None values ignored)

        Returns:
            ExporterConfig: Validated configuration object
        """
        values: Dict[str, Any] = Settings.overrides()

        if config_path:
            values.update(ConfigLoader.load_from_file(config_path).model_dump(exclude_unset=True))

        values.update({k: v for k, v in (cli_overrides or {}).items() if v is not None})
        return ConfigLoader.from_mapping(values)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
