# clients.py
"""
Async client for the bit.ly v2 API.

Provides an httpx transport and ``AsyncBitly``, which mirrors
``api_client.Bitly`` operation for operation.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

import config
from api_client import APIError
from bitly import BaseBitly, extract

logger = logging.getLogger(__name__)


async def fetch_body_async(
    url: str,
    timeout: float = config.REQUEST_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    GET a URL and return the response body.

    Args:
        url: Fully built request URL, credentials included.
        timeout: Seconds before the request is abandoned.
        transport: Optional httpx transport (used to mock the network).

    Returns:
        Response body text.

    Raises:
        APIError: If the request fails, times out, or returns non-2xx.
    """
    try:
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(url, timeout=timeout)
            response.raise_for_status()
            return response.text
    except httpx.TimeoutException as e:
        raise APIError(f"Request timed out: {e}") from e
    except httpx.HTTPStatusError as e:
        raise APIError(f"HTTP error {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise APIError(f"Request failed: {e}") from e


class AsyncBitly(BaseBitly):
    """
    Async bit.ly client with the same contract as ``api_client.Bitly``.

    The transport may be any coroutine function taking a URL and returning
    the body text, raising ``APIError`` on failure.
    """

    default_transport = staticmethod(fetch_body_async)

    async def shorten(self, long_url: str) -> str | dict[str, Any]:
        """Return the short URL for ``long_url``."""
        response = self.process(await self.request(self._shorten_url(long_url)))
        return extract(response, long_url, "shortUrl")

    async def expand(self, link: str) -> str | dict[str, Any]:
        """Return the long URL behind a short URL or hash."""
        url, key = self._link_url("expand", link)
        response = self.process(await self.request(url))
        return extract(response, key, "longUrl")

    async def info(
        self, link: str, fields: str | Sequence[str] | None = None
    ) -> dict[str, Any]:
        """Return the whole info "results" mapping for a short URL or hash."""
        response = self.process(await self.request(self._info_url(link, fields)))
        return extract(response)

    async def stats(self, link: str) -> dict[str, Any]:
        """Return traffic and referrer data for a short URL or hash."""
        url, _key = self._link_url("stats", link)
        response = self.process(await self.request(url))
        return extract(response)

    async def errors(self) -> Any:
        """Return the catalog of bit.ly error codes and messages."""
        response = self.process(await self.request(self._errors_url()))
        return extract(response)

    async def request(self, url: str) -> str | None:
        """
        Sign ``url`` with the account credentials and GET it.

        Returns:
            Response body, or None if the transport failed.
        """
        logger.debug("GET %s", url)
        try:
            return await self.transport(self._signed(url))
        except APIError as e:
            logger.error("bit.ly request to %s failed: %s", url, self._redact(e))
            return None
