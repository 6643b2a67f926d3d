"""Async HTTP image fetcher with retry on transient failures."""

from __future__ import annotations

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from agentchat.errors.exceptions import NetworkFailure

logger = logging.getLogger(__name__)

_TRANSIENT_STATUS = {408, 429, 500, 502, 503, 504}
_MAX_BACKOFF = 8.0  # seconds


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, NetworkFailure) and exc.transient


class ImageFetcher:
    """Downloads raw image bytes over HTTP(S).

    One call to :meth:`fetch` is one resolution attempt: transient failures
    (transport errors, 408/429/5xx) are retried with exponential backoff up to
    ``attempts`` times before a :class:`NetworkFailure` is raised.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        attempts: int = 3,
        backoff: float = 0.5,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._attempts = attempts
        self._backoff = backoff
        self._requests = 0

    @property
    def request_count(self) -> int:
        """Number of HTTP requests issued, retries included."""
        return self._requests

    async def fetch(self, url: str) -> bytes:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            wait=wait_exponential(multiplier=self._backoff, max=_MAX_BACKOFF),
            stop=stop_after_attempt(self._attempts),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info(
                        "Retrying %s (attempt %d/%d)",
                        url,
                        attempt.retry_state.attempt_number,
                        self._attempts,
                    )
                return await self._get(url)
        raise NetworkFailure("Fetch attempts exhausted", url=url)  # pragma: no cover

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, url: str) -> bytes:
        self._requests += 1
        try:
            response = await self._client.get(url)
        except httpx.InvalidURL as e:
            raise NetworkFailure(f"Invalid URL: {e}", url=url, original=e) from e
        except httpx.TransportError as e:
            raise NetworkFailure(
                f"Transport error: {e}", url=url, transient=True, original=e
            ) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(f"Request failed: {e}", url=url, original=e) from e

        if not response.is_success:
            raise NetworkFailure(
                f"HTTP {response.status_code} for {url}",
                url=url,
                http_status=response.status_code,
                transient=response.status_code in _TRANSIENT_STATUS,
            )
        return response.content
