"""Per-target collector registry for the serving layer."""

import logging
from collections import OrderedDict

from ..collectors.apache_collector import ApacheCollector
from ..utils.metrics import Target
from .status_fetcher import StatusFetcher

DEFAULT_MAX_TARGETS = 1000


class CollectorPool:
    """
    Hands out one long-lived collector per target.

    Reusing the collector keeps its lock and failure counter alive across
    requests, so overlapping scrapes of the same server serialize and the
    failure counter is monotonic while the target stays in the pool. The
    pool holds at most ``max_targets`` collectors; the least recently
    scraped one is evicted first, which resets only its failure counter.
    """

    def __init__(
        self,
        fetcher: StatusFetcher,
        logger: logging.Logger,
        max_targets: int = DEFAULT_MAX_TARGETS
    ):
        if max_targets < 1:
            raise ValueError("max_targets must be at least 1")
        self.fetcher = fetcher
        self.logger = logger
        self.max_targets = max_targets
        self._collectors: "OrderedDict[str, ApacheCollector]" = OrderedDict()

    def get(self, target: Target) -> ApacheCollector:
        """
        Return the collector bound to a target, creating it on first use.

        Args:
            target: Resolved and validated target

        Returns:
            ApacheCollector: Collector for that target
        """
        collector = self._collectors.get(target.uri)
        if collector is not None:
            self._collectors.move_to_end(target.uri)
            return collector

        self.logger.info(
            f"Creating collector for target '{target.uri}'",
            extra={"insecure": target.insecure, "timeout": target.timeout}
        )
        collector = ApacheCollector(target, self.fetcher, self.logger)
        self._collectors[target.uri] = collector

        while len(self._collectors) > self.max_targets:
            evicted_uri, _ = self._collectors.popitem(last=False)
            self.logger.debug(f"Evicted collector for target '{evicted_uri}'")
        return collector

    def __len__(self) -> int:
        return len(self._collectors)

    def __contains__(self, uri: str) -> bool:
        return uri in self._collectors
