"""Metric data structures shared by the fetcher, collectors and server."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlparse
import time

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from pydantic import BaseModel, ConfigDict, field_validator

NAMESPACE = "apache"


class Target(BaseModel):
    """One remote status endpoint. Immutable and hashable."""

    model_config = ConfigDict(frozen=True)

    uri: str
    insecure: bool = False
    timeout: Optional[float] = None  # Deadline for the fetch, in seconds

    @field_validator('uri')
    @classmethod
    def validate_uri(cls, v: str) -> str:
        """Validate URI format."""
        parsed = urlparse(v)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError('URI must be an absolute http:// or https:// URL')
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError('timeout must be positive')
        return v


@dataclass
class FetchResult:
    """Raw outcome of one status page request."""

    body: bytes
    status_code: int
    reason: str = ""


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help text and type of one metric family."""

    name: str
    documentation: str
    kind: str  # "gauge" or "counter"
    labels: Tuple[str, ...] = ()

    def new_family(self, value: Optional[float] = None) -> Metric:
        """
        Build an empty (or single-valued) metric family for this descriptor.

        Args:
            value: Optional unlabeled sample value

        Returns:
            Metric: CounterMetricFamily or GaugeMetricFamily
        """
        family_class = CounterMetricFamily if self.kind == "counter" else GaugeMetricFamily
        if value is not None:
            return family_class(self.name, self.documentation, value=value)
        return family_class(self.name, self.documentation, labels=list(self.labels))


def _desc(name: str, documentation: str, kind: str, labels: Tuple[str, ...] = ()) -> MetricDescriptor:
    return MetricDescriptor(f"{NAMESPACE}_{name}", documentation, kind, labels)


# Process-wide descriptors, shared by every collector instance.
UP = _desc("up", "Could the apache server be reached", "gauge")
SCRAPE_FAILURES = _desc(
    "exporter_scrape_failures_total", "Number of errors while scraping apache.", "counter"
)
ACCESSES_TOTAL = _desc("accesses_total", "Current total apache accesses (*)", "counter")
SENT_BYTES_TOTAL = _desc("sent_bytes_total", "Current total bytes sent (*)", "counter")
CPULOAD = _desc(
    "cpuload",
    "The current percentage CPU used by each worker and in total by all workers combined (*)",
    "gauge",
)
UPTIME = _desc("uptime_seconds_total", "Current uptime in seconds (*)", "counter")
WORKERS = _desc("workers", "Apache worker statuses", "gauge", ("state",))
SCOREBOARD = _desc("scoreboard", "Apache scoreboard statuses", "gauge", ("state",))
CONNECTIONS = _desc("connections", "Apache connection statuses", "gauge", ("state",))

ALL_DESCRIPTORS: Tuple[MetricDescriptor, ...] = (
    UP,
    ACCESSES_TOTAL,
    SENT_BYTES_TOTAL,
    UPTIME,
    CPULOAD,
    SCRAPE_FAILURES,
    WORKERS,
    SCOREBOARD,
    CONNECTIONS,
)


@dataclass
class ScrapeResult:
    """Everything one collection cycle emitted, in emission order."""

    target: str
    metrics: List[Metric] = field(default_factory=list)
    error: Optional[str] = None
    duration_seconds: float = 0.0
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()

    @property
    def success(self) -> bool:
        return self.error is None

    def family(self, name: str) -> Optional[Metric]:
        """
        Look up an emitted family by name.

        Counter families are stored without their ``_total`` suffix, so both
        spellings are accepted.
        """
        for metric in self.metrics:
            if metric.name == name or f"{metric.name}_total" == name:
                return metric
        return None
