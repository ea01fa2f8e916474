"""Environment settings used as CLI defaults."""

import os
from typing import Optional

ENV_PREFIX = "APACHE_EXPORTER_"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
        """
        Get environment variable value.

        Args:
            key: Variable name without the APACHE_EXPORTER_ prefix
            default: Default value if not set
            required: Whether the variable is required

        Returns:
            Optional[str]: Environment variable value, or default

        Raises:
            ValueError: If required variable is not set
        """
        value = os.getenv(ENV_PREFIX + key, default)
        if required and not value:
            raise ValueError(f"Required environment variable not set: {ENV_PREFIX}{key}")
        return value

    @staticmethod
    def get_bool(key: str, default: bool = False) -> bool:
        """
        Get a boolean environment variable.

        Raises:
            ValueError: If the value is not a recognizable boolean
        """
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default
        value = value.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean for {ENV_PREFIX}{key}: {value!r}")

    @staticmethod
    def overrides() -> dict:
        """
        Collect every exporter option set in the environment.

        Returns:
            dict: Config field name to raw value, only for variables that are set
        """
        fields = {
            "listen_address": "LISTEN_ADDRESS",
            "metrics_endpoint": "METRICS_ENDPOINT",
            "default_target": "SCRAPE_URI",
            "scrape_timeout_seconds": "SCRAPE_TIMEOUT",
            "max_targets": "MAX_TARGETS",
            "log_level": "LOG_LEVEL",
        }
        values = {}
        for name, key in fields.items():
            value = Settings.get(key)
            if value is not None:
                values[name] = value
        if Settings.get("INSECURE") is not None:
            values["insecure"] = Settings.get_bool("INSECURE")
        return values
