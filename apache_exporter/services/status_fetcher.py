"""HTTP fetcher for the mod_status machine-readable page."""

import asyncio
import logging
from typing import Optional

import httpx

from ..utils.errors import TransportError
from ..utils.metrics import FetchResult, Target

USER_AGENT = "apache_exporter"


def build_client(insecure: bool = False, timeout: Optional[float] = None) -> httpx.AsyncClient:
    """
    Create the process-wide HTTP client.

    TLS verification is decided here, once per process, and is on unless
    ``insecure`` is set.

    Args:
        insecure: Skip server certificate verification
        timeout: Default per-request timeout in seconds (None = no limit)

    Returns:
        httpx.AsyncClient: Client honouring proxy environment variables
    """
    return httpx.AsyncClient(
        verify=not insecure,
        timeout=httpx.Timeout(timeout),
        trust_env=True,
        headers={"User-Agent": USER_AGENT},
    )


class StatusFetcher:
    """Performs one GET against a target and returns the raw response."""

    def __init__(self, client: httpx.AsyncClient, logger: logging.Logger):
        """
        Initialize status fetcher.

        Args:
            client: Shared HTTP client (owns the TLS policy)
            logger: Logger instance
        """
        self.client = client
        self.logger = logger.getChild(self.__class__.__name__)

    async def fetch(self, target: Target) -> FetchResult:
        """
        Fetch the status page of a target.

        Non-2xx responses are returned as-is; judging them is up to the caller.

        Args:
            target: Endpoint to request

        Returns:
            FetchResult: Body and status code

        Raises:
            TransportError: Connection failure or deadline exceeded
        """
        try:
            if target.timeout is None:
                return await self._get(target.uri)
            return await asyncio.wait_for(self._get(target.uri), timeout=target.timeout)

        except asyncio.TimeoutError as e:
            raise TransportError(
                target.uri, TimeoutError(f"deadline of {target.timeout}s exceeded")
            ) from e

        except httpx.HTTPError as e:
            raise TransportError(target.uri, e) from e

    async def _get(self, uri: str) -> FetchResult:
        async with self.client.stream("GET", uri) as response:
            body = await response.aread()
        self.logger.debug(
            f"GET {uri} -> {response.status_code}",
            extra={"status_code": response.status_code, "bytes": len(body)}
        )
        return FetchResult(
            body=body,
            status_code=response.status_code,
            reason=response.reason_phrase,
        )
