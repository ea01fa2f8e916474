"""HTTP serving layer: per-request registry and Prometheus exposition."""

from contextlib import asynccontextmanager
from typing import List, Optional
import logging
import platform

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from prometheus_client import CollectorRegistry, PlatformCollector, ProcessCollector, generate_latest
from prometheus_client.core import InfoMetricFamily, Metric
from prometheus_client.exposition import CONTENT_TYPE_LATEST
from pydantic import ValidationError

from .config.models import ExporterConfig
from .services.collector_pool import CollectorPool
from .services.status_fetcher import StatusFetcher, build_client
from .utils.logger import setup_logger
from .utils.metrics import ScrapeResult, Target
from .version import PROGRAM, __version__

LANDING_PAGE = """<!doctype html><html>
<head>
    <meta charset="UTF-8">
    <title>Apache Exporter</title>
</head>
<body>
    <h1>Apache Exporter</h1>
    <ul>
        <li><a href="{endpoint}">Runtime Metrics with default probe</a></li>
        <li><a href="{endpoint}?runtime=false&target=http%3A%2F%2Flocalhost%2Fserver-status%3Fauto">Only http://localhost/server-status?auto</a></li>
        <li><a href="{endpoint}?target=false">Runtime Metrics without probe</a></li>
    </ul>
</body>
</html>
"""


class ScrapeResultCollector:
    """Registry adapter exposing the families of one finished cycle."""

    def __init__(self, result: ScrapeResult, declared: List[Metric]):
        self.result = result
        self.declared = declared

    def describe(self) -> List[Metric]:
        return self.declared

    def collect(self) -> List[Metric]:
        return self.result.metrics


class BuildInfoCollector:
    """Exports apache_exporter_build_info."""

    def collect(self) -> List[Metric]:
        family = InfoMetricFamily(
            f"{PROGRAM}_build",
            "A metric with a constant '1' value labeled by version and python version.",
        )
        family.add_metric([], {"version": __version__, "pythonversion": platform.python_version()})
        return [family]


def resolve_target(requested: Optional[str], config: ExporterConfig) -> Target:
    """
    Turn the ``target`` query parameter into a Target.

    Args:
        requested: Raw query value; empty or missing means the default target
        config: Exporter configuration

    Returns:
        Target: Validated target

    Raises:
        pydantic.ValidationError: If the URI is malformed
    """
    return Target(
        uri=requested or config.default_target,
        insecure=config.insecure,
        timeout=config.scrape_timeout_seconds,
    )


def create_app(
    config: ExporterConfig,
    logger: Optional[logging.Logger] = None,
    fetcher: Optional[StatusFetcher] = None
) -> FastAPI:
    """
    Build the exporter application.

    Args:
        config: Exporter configuration
        logger: Optional logger instance
        fetcher: Optional pre-built fetcher (the app then owns no HTTP client)

    Returns:
        FastAPI: Configured application
    """
    logger = logger or setup_logger(PROGRAM, config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the shared HTTP client on startup, close it on shutdown."""
        client = None
        active_fetcher = fetcher
        if active_fetcher is None:
            client = build_client(insecure=config.insecure)
            active_fetcher = StatusFetcher(client, logger)
        app.state.pool = CollectorPool(active_fetcher, logger, max_targets=config.max_targets)
        yield
        if client is not None:
            await client.aclose()

    app = FastAPI(title="Apache Exporter", lifespan=lifespan)

    @app.get(config.metrics_endpoint)
    async def metrics(request: Request):
        """Scrape the requested target and expose the results."""
        registry = CollectorRegistry()
        params = request.query_params

        if params.get("runtime") != "false":
            registry.register(BuildInfoCollector())
            ProcessCollector(registry=registry)
            PlatformCollector(registry=registry)

        requested = params.get("target", "")
        if requested != "false":
            try:
                target = resolve_target(requested, config)
            except ValidationError as e:
                logger.warning(f"Rejected target '{requested}': {e.errors()[0]['msg']}")
                return PlainTextResponse(f"Invalid target '{requested}'\n", status_code=400)

            collector = request.app.state.pool.get(target)
            result = await collector.collect()
            registry.register(ScrapeResultCollector(result, collector.describe()))

        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/")
    async def index():
        return HTMLResponse(LANDING_PAGE.format(endpoint=config.metrics_endpoint))

    return app
