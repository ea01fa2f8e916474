"""Shared pytest configuration and fixtures."""

import pytest
from unittest.mock import AsyncMock, Mock

from apache_exporter.collectors.apache_collector import ApacheCollector
from apache_exporter.utils.logger import setup_logger
from apache_exporter.utils.metrics import FetchResult, Target


TARGET_URI = "http://web01.example.com/server-status?auto"

FULL_STATUS_BODY = b"""web01.example.com
ServerVersion: Apache/2.4.57 (Unix)
ServerMPM: event
Server Built: Apr  6 2023 00:00:00
CurrentTime: Wednesday, 18-Oct-2026 10:00:00 UTC
Total Accesses: 131
Total kBytes: 138
CPULoad: .00995536
Uptime: 2311
ReqPerSec: .0566854
BytesPerSec: 61.1459
BusyWorkers: 1
IdleWorkers: 74
ConnsTotal: 3
ConnsAsyncWriting: 0
ConnsAsyncKeepAlive: 2
ConnsAsyncClosing: 1
Scoreboard: _W___K___________________________..........
"""


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test", "DEBUG")


@pytest.fixture
def target():
    return Target(uri=TARGET_URI)


@pytest.fixture
def fetcher():
    """StatusFetcher double whose fetch() is an AsyncMock."""
    mock_fetcher = Mock()
    mock_fetcher.fetch = AsyncMock(return_value=FetchResult(body=FULL_STATUS_BODY, status_code=200, reason="OK"))
    return mock_fetcher


@pytest.fixture
def make_collector(target, fetcher, logger):
    """Build a collector that returns the given body from its fetcher."""
    def _make(body=None, status_code=200, reason="OK", side_effect=None):
        if body is not None:
            fetcher.fetch.return_value = FetchResult(body=body, status_code=status_code, reason=reason)
        if side_effect is not None:
            fetcher.fetch.side_effect = side_effect
        return ApacheCollector(target, fetcher, logger)
    return _make


@pytest.fixture
def sample_values():
    """Flatten a ScrapeResult into {(sample_name, labels): value}."""
    def _flatten(result):
        values = {}
        for family in result.metrics:
            for sample in family.samples:
                labels = tuple(sorted(sample.labels.items()))
                values[(sample.name, labels)] = sample.value
        return values
    return _flatten
