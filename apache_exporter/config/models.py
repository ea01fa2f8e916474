"""Pydantic configuration models for the exporter."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from urllib.parse import urlparse

DEFAULT_LISTEN_ADDRESS = ":9117"
DEFAULT_METRICS_ENDPOINT = "/metrics"
DEFAULT_TARGET = "http://localhost/server-status?auto"


class ExporterConfig(BaseModel):
    """Exporter configuration."""
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    metrics_endpoint: str = DEFAULT_METRICS_ENDPOINT
    default_target: str = DEFAULT_TARGET
    insecure: bool = False  # Skip TLS certificate verification
    scrape_timeout_seconds: Optional[float] = Field(default=10.0, gt=0)
    max_targets: int = Field(default=1000, ge=1)  # Collectors kept for distinct targets
    log_level: str = "INFO"

    @field_validator('listen_address')
    @classmethod
    def validate_listen_address(cls, v: str) -> str:
        """Validate host:port format. Host may be empty (all interfaces)."""
        host, sep, port = v.rpartition(':')
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError('listen_address must look like "host:port" or ":port"')
        return v

    @field_validator('metrics_endpoint')
    @classmethod
    def validate_metrics_endpoint(cls, v: str) -> str:
        if not v.startswith('/') or v == '/':
            raise ValueError('metrics_endpoint must be a path like /metrics')
        return v

    @field_validator('default_target')
    @classmethod
    def validate_default_target(cls, v: str) -> str:
        """Validate URL format."""
        parsed = urlparse(v)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError('default_target must start with http:// or https://')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @property
    def host(self) -> str:
        host = self.listen_address.rpartition(':')[0]
        return host.strip('[]') or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.listen_address.rpartition(':')[2])
