# bitly.py
"""
Query building and response handling shared by the sync and async clients.

Every bit.ly v2 call has the same shape: build a query-string URL, append
credentials, GET it, decode the JSON envelope, check ``errorCode`` and pull
the interesting value out of ``results``. Everything except the GET lives
here so ``api_client.Bitly`` and ``clients.AsyncBitly`` only differ in how
they perform I/O.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any, Callable
from urllib.parse import quote, urlencode

import config

logger = logging.getLogger(__name__)

SHORT_URL_PREFIX = "http://bit.ly/"

# Characters left literal in query values so plain URLs read as sent
QUERY_SAFE_CHARS = ":/,"


def encode_query(params: dict[str, str]) -> str:
    """Percent-encode query parameters, keeping their insertion order."""
    return urlencode(params, safe=QUERY_SAFE_CHARS, quote_via=quote)


def build_url(api_url: str, method: str, params: dict[str, str]) -> str:
    """
    Build the URL for an API method, without credentials.

    Args:
        api_url: Base URL of the API (no trailing slash).
        method: API method name, e.g. "shorten".
        params: Query parameters, version first.

    Returns:
        Full request URL.
    """
    return f"{api_url}/{method}?{encode_query(params)}"


def with_credentials(url: str, login: str, api_key: str) -> str:
    """Append login and apiKey to an already-built request URL."""
    return f"{url}&{encode_query({'login': login, 'apiKey': api_key})}"


def link_param(link: str) -> tuple[dict[str, str], str]:
    """
    Decide whether a link is a full short URL or a bare hash.

    Args:
        link: Either "http://bit.ly/<hash>" or a bare hash.

    Returns:
        Tuple of (query parameter dict, results lookup key).
    """
    if link.startswith(SHORT_URL_PREFIX):
        return {"shortUrl": link}, link[len(SHORT_URL_PREFIX):]
    return {"hash": link}, link


def process(data: str | None) -> dict[str, Any]:
    """
    Decode a response body into the envelope mapping.

    Args:
        data: Raw response body, or None when the transport failed.

    Returns:
        Decoded envelope, or an empty dict if there was nothing usable.
    """
    if not data:
        logger.debug("No response body to decode")
        return {}

    try:
        decoded = json.loads(data)
    except (ValueError, RecursionError) as e:
        logger.warning("Response body is not valid JSON: %s", e)
        return {}

    if not isinstance(decoded, dict):
        logger.warning("Expected a JSON object, got %s", type(decoded).__name__)
        return {}
    return decoded


def is_success(response: dict[str, Any]) -> bool:
    """
    A response succeeded only if it carries errorCode 0.

    Numeric strings ("0") are accepted, booleans are not.
    """
    code = response.get("errorCode")
    if isinstance(code, str) and code.strip().isdigit():
        code = int(code)
    return code == 0 and not isinstance(code, bool)


def extract(response: dict[str, Any], *path: str) -> Any:
    """
    Pull a value out of a successful envelope's results.

    Args:
        response: Decoded envelope.
        *path: Keys to follow below "results". Empty returns "results" itself.

    Returns:
        The value found, or the whole envelope if the call failed or the
        path is missing.
    """
    if not is_success(response):
        if response:
            logger.warning(
                "bit.ly returned error %s: %s",
                response.get("errorCode"),
                response.get("errorMessage"),
            )
        return response

    if "results" not in response:
        logger.warning("Successful response has no results")
        return response

    value = response["results"]
    for step in path:
        if not isinstance(value, dict) or step not in value:
            logger.warning("Successful response missing results/%s", "/".join(path))
            return response
        value = value[step]
    return value


class BaseBitly:
    """Credentials, version and per-method URL building for a bit.ly account."""

    default_transport: Callable[..., Any] | None = None

    def __init__(
        self,
        login: str,
        api_key: str,
        version: str = config.BITLY_API_VERSION,
        api_url: str = config.BITLY_API_URL,
        transport: Callable[[str], Any] | None = None,
    ) -> None:
        self._login = login
        self._api_key = api_key
        self._version = version
        self._api_url = api_url.rstrip("/")
        self._transport = transport or type(self).default_transport

    @property
    def login(self) -> str:
        return self._login

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def version(self) -> str:
        return self._version

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def transport(self) -> Callable[[str], Any]:
        return self._transport

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(login={self._login!r}, "
            f"version={self._version!r}, api_url={self._api_url!r})"
        )

    def _url(self, method: str, **params: str) -> str:
        return build_url(self._api_url, method, {"version": self._version, **params})

    def _signed(self, url: str) -> str:
        return with_credentials(url, self._login, self._api_key)

    def _redact(self, error: Exception) -> str:
        # transport errors may echo the signed URL
        message = str(error)
        if self._api_key:
            message = message.replace(self._api_key, "***")
        return message

    def _shorten_url(self, long_url: str) -> str:
        return self._url("shorten", longUrl=long_url)

    def _link_url(self, method: str, link: str) -> tuple[str, str]:
        params, key = link_param(link)
        return self._url(method, **params), key

    def _info_url(self, link: str, fields: str | Sequence[str] | None) -> str:
        params, _key = link_param(link)
        if fields:
            if not isinstance(fields, str):
                fields = ",".join(fields)
            params["keys"] = fields
        return self._url("info", **params)

    def _errors_url(self) -> str:
        return self._url("errors")

    @staticmethod
    def process(data: str | None) -> dict[str, Any]:
        """Decode a response body; see ``bitly.process``."""
        return process(data)
