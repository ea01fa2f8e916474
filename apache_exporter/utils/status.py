"""Scrape cycle state enumeration."""

from enum import Enum


class ScrapeState(Enum):
    """Stage a collector is in during one collection cycle."""

    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    EMITTING = "emitting"
    FAILED = "failed"

    def is_busy(self) -> bool:
        """
        Whether a cycle is currently in progress.

        Returns:
            bool: True for every state except IDLE
        """
        return self is not ScrapeState.IDLE
