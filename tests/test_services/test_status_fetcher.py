"""Tests for StatusFetcher."""

import asyncio
import logging
from unittest.mock import patch

import httpx
import pytest

from apache_exporter.services.status_fetcher import USER_AGENT, StatusFetcher, build_client
from apache_exporter.utils.errors import TransportError
from apache_exporter.utils.metrics import Target

URI = "http://web01/server-status?auto"


def make_fetcher(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return StatusFetcher(client, logging.getLogger("test"))


@pytest.mark.asyncio
async def test_fetch_success():
    def handler(request):
        assert request.method == "GET"
        assert str(request.url) == URI
        return httpx.Response(200, content=b"Uptime: 5\n")

    result = await make_fetcher(handler).fetch(Target(uri=URI))

    assert result.status_code == 200
    assert result.body == b"Uptime: 5\n"
    assert result.reason == "OK"


@pytest.mark.asyncio
async def test_fetch_non_2xx_is_returned():
    """Judging the status code is the caller's job."""
    def handler(request):
        return httpx.Response(403, content=b"Forbidden")

    result = await make_fetcher(handler).fetch(Target(uri=URI))

    assert result.status_code == 403
    assert result.body == b"Forbidden"


@pytest.mark.asyncio
async def test_fetch_connection_refused():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        await make_fetcher(handler).fetch(Target(uri=URI))

    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert exc_info.value.uri == URI
    assert "Connection refused" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_deadline_exceeded():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200)

    with pytest.raises(TransportError) as exc_info:
        await make_fetcher(handler).fetch(Target(uri=URI, timeout=0.05))

    assert "deadline" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_http_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        await make_fetcher(handler).fetch(Target(uri=URI))


def test_build_client_verifies_by_default():
    with patch("apache_exporter.services.status_fetcher.httpx.AsyncClient") as client_class:
        build_client()

    assert client_class.call_args.kwargs["verify"] is True
    assert client_class.call_args.kwargs["headers"] == {"User-Agent": USER_AGENT}


def test_build_client_insecure():
    with patch("apache_exporter.services.status_fetcher.httpx.AsyncClient") as client_class:
        build_client(insecure=True)

    assert client_class.call_args.kwargs["verify"] is False


class TestTarget:
    """Target validation."""

    @pytest.mark.parametrize("uri", [
        "http://localhost/server-status?auto",
        "https://web01:8443/status?auto",
    ])
    def test_valid(self, uri):
        assert Target(uri=uri).uri == uri

    @pytest.mark.parametrize("uri", ["", "localhost/server-status", "ftp://host/x", "http://"])
    def test_invalid(self, uri):
        with pytest.raises(ValueError):
            Target(uri=uri)

    def test_immutable(self):
        target = Target(uri=URI)
        with pytest.raises(Exception):
            target.uri = "http://other/"

    def test_hashable(self):
        assert hash(Target(uri=URI)) == hash(Target(uri=URI))

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Target(uri=URI, timeout=0)
