# file: api_client.py
"""HTTP client for the bit.ly v2 API."""
import logging
from collections.abc import Sequence
from typing import Any

import requests

import config
from bitly import BaseBitly, extract

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when an HTTP call to the API fails."""

    pass


def fetch_body(url: str, timeout: float = config.REQUEST_TIMEOUT) -> str:
    """
    GET a URL and return the response body.

    Args:
        url: Fully built request URL, credentials included.
        timeout: Seconds before the request is abandoned.

    Returns:
        Response body text.

    Raises:
        APIError: On network error, timeout, or non-2xx status.
    """
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    except requests.RequestException as e:
        raise APIError(f"Request failed: {e}") from e


class Bitly(BaseBitly):
    """
    Synchronous bit.ly client.

    Every operation returns the interesting value on success and the whole
    decoded envelope otherwise, so callers branch on the returned value
    rather than catching exceptions. A transport failure yields ``{}``.

    Usage:
        bitly = Bitly("login", "R_apikey")
        bitly.shorten("http://example.com")
        bitly.expand("http://bit.ly/ABCDE")
        bitly.info("FGHiJ", "htmlTitle,thumbnail")
        bitly.stats("DEFjJ")
    """

    default_transport = staticmethod(fetch_body)

    def shorten(self, long_url: str) -> str | dict[str, Any]:
        """Return the short URL for ``long_url``."""
        response = self.process(self.request(self._shorten_url(long_url)))
        return extract(response, long_url, "shortUrl")

    def expand(self, link: str) -> str | dict[str, Any]:
        """Return the long URL behind a short URL or hash."""
        url, key = self._link_url("expand", link)
        response = self.process(self.request(url))
        return extract(response, key, "longUrl")

    def info(
        self, link: str, fields: str | Sequence[str] | None = None
    ) -> dict[str, Any]:
        """
        Return metadata for a short URL or hash.

        The result is the whole "results" mapping, keyed by hash, e.g.
        ``{"FGHiJ": {"htmlTitle": ..., "longUrl": ..., "thumbnail": {...}}}``.

        Args:
            link: Short URL or hash.
            fields: Optional field names to restrict the response to, as a
                comma-separated string or a sequence.
        """
        response = self.process(self.request(self._info_url(link, fields)))
        return extract(response)

    def stats(self, link: str) -> dict[str, Any]:
        """
        Return traffic and referrer data for a short URL or hash.

        Keys: clicks, hash, referrers, userClicks, userHash, userReferrers.
        """
        url, _key = self._link_url("stats", link)
        response = self.process(self.request(url))
        return extract(response)

    def errors(self) -> Any:
        """Return the catalog of bit.ly error codes and messages."""
        response = self.process(self.request(self._errors_url()))
        return extract(response)

    def request(self, url: str) -> str | None:
        """
        Sign ``url`` with the account credentials and GET it.

        Returns:
            Response body, or None if the transport failed.
        """
        logger.debug("GET %s", url)
        try:
            return self.transport(self._signed(url))
        except APIError as e:
            logger.error("bit.ly request to %s failed: %s", url, self._redact(e))
            return None
