"""Collector for the Apache mod_status ``?auto`` page."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import logging
import re

from prometheus_client.core import Metric

from ..services.status_fetcher import StatusFetcher
from ..utils.errors import ContentValidityError, ParseError, TransportError
from ..utils.metrics import (
    ACCESSES_TOTAL,
    ALL_DESCRIPTORS,
    CONNECTIONS,
    CPULOAD,
    SCOREBOARD,
    SENT_BYTES_TOTAL,
    UP,
    UPTIME,
    WORKERS,
    MetricDescriptor,
    Target,
)
from ..utils.status import ScrapeState
from .base import BaseCollector
from .scoreboard import decode_scoreboard


def split_field(line: str) -> Tuple[str, str]:
    """
    Split a status line on its first colon.

    Args:
        line: One line of the response body

    Returns:
        Tuple[str, str]: Trimmed key and value; value is "" when there is no colon
    """
    key, _, value = line.partition(":")
    return key.strip(), value.strip()


# Decimal floats plus inf/nan; no digit separators or non-ASCII digits.
NUMBER_PATTERN = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?inf(?:inity)?|nan",
    re.ASCII | re.IGNORECASE,
)


def parse_number(key: str, value: str) -> float:
    if not NUMBER_PATTERN.fullmatch(value):
        raise ParseError(key, value)
    return float(value)


@dataclass
class ParseState:
    """Per-cycle accumulator for emitted families and the labeled gauge groups."""

    emit: List[Metric]
    labeled: Dict[MetricDescriptor, Dict[str, float]] = field(default_factory=dict)
    positions: Dict[MetricDescriptor, int] = field(default_factory=dict)

    def put(self, descriptor: MetricDescriptor, family: Metric) -> None:
        """Emit a family; a repeated key replaces the earlier one in place."""
        position = self.positions.get(descriptor)
        if position is None:
            self.positions[descriptor] = len(self.emit)
            self.emit.append(family)
        else:
            self.emit[position] = family


@dataclass(frozen=True)
class FieldHandler(ABC):
    """Maps one recognized status key onto a metric."""

    descriptor: MetricDescriptor

    @abstractmethod
    def apply(self, key: str, value: str, state: ParseState) -> None:
        pass


@dataclass(frozen=True)
class CounterField(FieldHandler):
    scale: float = 1.0

    def apply(self, key: str, value: str, state: ParseState) -> None:
        number = parse_number(key, value)
        state.put(self.descriptor, self.descriptor.new_family(number * self.scale))


@dataclass(frozen=True)
class GaugeField(FieldHandler):

    def apply(self, key: str, value: str, state: ParseState) -> None:
        state.put(self.descriptor, self.descriptor.new_family(parse_number(key, value)))


@dataclass(frozen=True)
class LabeledGaugeField(FieldHandler):
    """Sets one label of a gauge group that is emitted after parsing."""

    label: str

    def apply(self, key: str, value: str, state: ParseState) -> None:
        number = parse_number(key, value)
        state.labeled.setdefault(self.descriptor, {})[self.label] = number


@dataclass(frozen=True)
class ScoreboardField(FieldHandler):

    def apply(self, key: str, value: str, state: ParseState) -> None:
        family = self.descriptor.new_family()
        for label, count in decode_scoreboard(value).items():
            family.add_metric([label], count)
        state.put(self.descriptor, family)


FIELD_HANDLERS: Dict[str, FieldHandler] = {
    "Total Accesses": CounterField(ACCESSES_TOTAL),
    "Total kBytes": CounterField(SENT_BYTES_TOTAL, scale=1024),
    "CPULoad": GaugeField(CPULOAD),
    "Uptime": CounterField(UPTIME),
    "BusyWorkers": LabeledGaugeField(WORKERS, "busy"),
    "IdleWorkers": LabeledGaugeField(WORKERS, "idle"),
    "Scoreboard": ScoreboardField(SCOREBOARD),
    "ConnsTotal": LabeledGaugeField(CONNECTIONS, "total"),
    "ConnsAsyncWriting": LabeledGaugeField(CONNECTIONS, "writing"),
    "ConnsAsyncKeepAlive": LabeledGaugeField(CONNECTIONS, "keepalive"),
    "ConnsAsyncClosing": LabeledGaugeField(CONNECTIONS, "closing"),
}


def _labeled_family(descriptor: MetricDescriptor, values: Dict[str, float]) -> Metric:
    family = descriptor.new_family()
    for label, number in values.items():
        family.add_metric([label], number)
    return family


class ApacheCollector(BaseCollector):
    """Scrapes one Apache server and maps its status fields to metrics."""

    def __init__(self, target: Target, fetcher: StatusFetcher, logger: logging.Logger):
        """
        Initialize Apache collector.

        Args:
            target: Status page to scrape
            fetcher: Shared status fetcher
            logger: Logger instance
        """
        super().__init__(target, logger)
        self.fetcher = fetcher

    def describe(self) -> List[Metric]:
        return [descriptor.new_family() for descriptor in ALL_DESCRIPTORS]

    async def scrape(self, emit: List[Metric]) -> None:
        self.state = ScrapeState.FETCHING
        try:
            response = await self.fetcher.fetch(self.target)
        except TransportError:
            emit.append(UP.new_family(0))
            raise
        emit.append(UP.new_family(1))

        # Reachable but unusable is reported through the failure counter only
        if response.status_code != 200:
            raise ContentValidityError(response.status_code, response.reason, response.body)

        self.state = ScrapeState.PARSING
        state = ParseState(emit=emit)
        self.parse(response.body.decode("utf-8", errors="replace"), state)

        self.state = ScrapeState.EMITTING
        emit.append(_labeled_family(WORKERS, state.labeled.get(WORKERS, {})))
        # Servers without async connection reporting get no connection series
        if CONNECTIONS in state.labeled:
            emit.append(_labeled_family(CONNECTIONS, state.labeled[CONNECTIONS]))

    @staticmethod
    def parse(text: str, state: ParseState) -> None:
        """
        Dispatch every recognized field of a status body.

        Args:
            text: Decoded response body
            state: Accumulator receiving the emitted families

        Raises:
            ParseError: A recognized field is not numeric
        """
        for line in text.split("\n"):
            if not line:
                continue
            key, value = split_field(line)
            handler = FIELD_HANDLERS.get(key)
            if handler is not None:
                handler.apply(key, value, state)
