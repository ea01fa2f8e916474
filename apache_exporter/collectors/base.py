"""Base collector abstract class for scrape collectors."""

from abc import ABC, abstractmethod
from typing import List
import asyncio
import logging
import time

from prometheus_client.core import Metric

from ..utils.errors import ScrapeError
from ..utils.metrics import SCRAPE_FAILURES, ScrapeResult, Target
from ..utils.status import ScrapeState


class BaseCollector(ABC):
    """
    Abstract base class for collectors bound to a single target.

    Owns the per-instance lock and the scrape failure counter. Subclasses
    implement ``scrape`` and ``describe``; ``collect`` runs one full cycle.
    """

    def __init__(self, target: Target, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            target: Endpoint this collector scrapes for its whole lifetime
            logger: Logger instance
        """
        self.target = target
        self.logger = logger.getChild(self.__class__.__name__)
        self.state = ScrapeState.IDLE
        self.scrape_failures = 0
        self._lock = asyncio.Lock()

    @abstractmethod
    def describe(self) -> List[Metric]:
        """
        Declare every metric family this collector can ever emit.

        Returns:
            List[Metric]: Families without samples
        """
        pass

    @abstractmethod
    async def scrape(self, emit: List[Metric]) -> None:
        """
        Run fetch, parse and emit for one cycle.

        Families are appended to ``emit`` as soon as they are complete, so a
        failure part-way through leaves the earlier ones in place.

        Args:
            emit: Output batch for this cycle

        Raises:
            ScrapeError: Any failure that should count as a failed scrape
        """
        pass

    async def collect(self) -> ScrapeResult:
        """
        Run one collection cycle under the instance lock.

        Never raises for scrape failures: the error is logged, the failure
        counter is incremented and emitted, and the partial batch is returned.

        Returns:
            ScrapeResult: Emitted families in order, plus the error if any
        """
        async with self._lock:
            result = ScrapeResult(target=self.target.uri)
            start_time = time.perf_counter()
            try:
                await self.scrape(result.metrics)

            except ScrapeError as e:
                self._record_failure(result, e)

            except Exception as e:
                self.logger.error("Unexpected scrape failure", exc_info=True)
                self._record_failure(result, e)

            finally:
                self.state = ScrapeState.IDLE

            result.duration_seconds = time.perf_counter() - start_time
            if result.success:
                self.logger.debug(
                    f"Scraped {self.target.uri} in {result.duration_seconds:.3f}s",
                    extra={"families": len(result.metrics)}
                )
            return result

    def _record_failure(self, result: ScrapeResult, error: Exception) -> None:
        self.state = ScrapeState.FAILED
        self.logger.error(f"Error scraping target '{self.target.uri}': {error}")
        self.scrape_failures += 1
        self.state = ScrapeState.EMITTING
        result.metrics.append(SCRAPE_FAILURES.new_family(self.scrape_failures))
        result.error = str(error)
