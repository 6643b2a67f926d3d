"""Tests for the HTTP image fetcher."""

import httpx
import pytest

from agentchat.cache.fetch import ImageFetcher
from agentchat.errors.exceptions import NetworkFailure

URL = "https://images.example.com/photo.jpg"


class TestImageFetcher:
    async def test_success_returns_body(self, make_client):
        client = make_client(lambda request: httpx.Response(200, content=b"bytes"))
        fetcher = ImageFetcher(client=client)
        assert await fetcher.fetch(URL) == b"bytes"
        assert fetcher.request_count == 1

    async def test_not_found_is_not_retried(self, make_client):
        client = make_client(lambda request: httpx.Response(404))
        fetcher = ImageFetcher(client=client, attempts=3, backoff=0)
        with pytest.raises(NetworkFailure) as exc_info:
            await fetcher.fetch(URL)
        assert exc_info.value.http_status == 404
        assert exc_info.value.transient is False
        assert fetcher.request_count == 1

    async def test_server_error_retried_then_succeeds(self, make_client):
        responses = iter([httpx.Response(503), httpx.Response(200, content=b"ok")])
        client = make_client(lambda request: next(responses))
        fetcher = ImageFetcher(client=client, attempts=3, backoff=0)
        assert await fetcher.fetch(URL) == b"ok"
        assert fetcher.request_count == 2

    async def test_transport_error_exhausts_attempts(self, make_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = ImageFetcher(client=make_client(handler), attempts=2, backoff=0)
        with pytest.raises(NetworkFailure) as exc_info:
            await fetcher.fetch(URL)
        assert exc_info.value.transient is True
        assert isinstance(exc_info.value.original, httpx.ConnectError)
        assert fetcher.request_count == 2

    async def test_redirect_loop_is_terminal_failure(self, make_client):
        def handler(request):
            return httpx.Response(302, headers={"Location": str(request.url)})

        client = make_client(handler, follow_redirects=True)
        fetcher = ImageFetcher(client=client, attempts=3, backoff=0)
        with pytest.raises(NetworkFailure) as exc_info:
            await fetcher.fetch(URL)
        assert exc_info.value.transient is False
        assert isinstance(exc_info.value.original, httpx.TooManyRedirects)
        assert fetcher.request_count == 1

    async def test_does_not_close_injected_client(self, make_client):
        client = make_client(lambda request: httpx.Response(200))
        fetcher = ImageFetcher(client=client)
        await fetcher.close()
        assert not client.is_closed

    async def test_closes_owned_client(self):
        fetcher = ImageFetcher()
        await fetcher.close()
        assert fetcher._client.is_closed
