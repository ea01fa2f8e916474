"""Tests for BaseCollector class."""

import logging

import pytest

from apache_exporter.collectors.base import BaseCollector
from apache_exporter.utils.errors import ScrapeError
from apache_exporter.utils.metrics import UP, Target
from apache_exporter.utils.status import ScrapeState


class MockCollector(BaseCollector):
    """Mock collector for testing BaseCollector functionality."""

    def __init__(self, error=None):
        super().__init__(Target(uri="http://localhost/server-status?auto"), logging.getLogger(__name__))
        self.error = error
        self.seen_states = []

    def describe(self):
        return [UP.new_family()]

    async def scrape(self, emit):
        self.seen_states.append(self.state)
        emit.append(UP.new_family(1))
        if self.error is not None:
            raise self.error


class TestBaseCollector:
    """Test suite for BaseCollector."""

    @pytest.mark.asyncio
    async def test_success_leaves_counter_alone(self):
        collector = MockCollector()

        result = await collector.collect()

        assert result.success
        assert result.error is None
        assert collector.scrape_failures == 0
        assert [m.name for m in result.metrics] == ["apache_up"]
        assert result.duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_scrape_error_counted(self):
        collector = MockCollector(error=ScrapeError("boom"))

        result = await collector.collect()

        assert not result.success
        assert result.error == "boom"
        assert collector.scrape_failures == 1
        assert [m.name for m in result.metrics] == ["apache_up", "apache_exporter_scrape_failures"]

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_escape(self):
        """Programming errors still yield a well-formed batch."""
        collector = MockCollector(error=KeyError("missing"))

        result = await collector.collect()

        assert collector.scrape_failures == 1
        assert result.metrics[-1].samples[0].value == 1

    @pytest.mark.asyncio
    async def test_state_reset_after_failure(self):
        collector = MockCollector(error=ScrapeError("boom"))

        await collector.collect()

        assert collector.state == ScrapeState.IDLE
        assert not collector.state.is_busy()

    @pytest.mark.asyncio
    async def test_lock_released(self):
        collector = MockCollector(error=ScrapeError("boom"))

        await collector.collect()

        assert not collector._lock.locked()

    def test_result_timestamp_set(self):
        from apache_exporter.utils.metrics import ScrapeResult
        result = ScrapeResult(target="http://localhost/")
        assert result.timestamp is not None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
