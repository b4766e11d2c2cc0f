"""Tests for the synchronous bit.ly client and its requests transport."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from api_client import APIError, Bitly, fetch_body

ERROR_ENVELOPE = {
    "errorCode": 203,
    "errorMessage": "You must be authenticated to access shorten",
    "statusCode": "ERROR",
}

INFO_RESULTS = {
    "FGHiJ": {
        "htmlTitle": "Example Domain",
        "longUrl": "http://example.com",
        "keywords": ["example", "domain"],
        "thumbnail": {"small": "http://s.bit.ly/small.png"},
        "calais": {},
    }
}

STATS_RESULTS = {
    "clicks": 42,
    "hash": "FGHiJ",
    "referrers": [{"domain": "twitter.com", "path": "/", "clicks": 40}],
    "userClicks": 2,
    "userHash": "xyz12",
    "userReferrers": [{"domain": "", "path": "direct", "clicks": 2}],
}


def ok(results):
    return {"errorCode": 0, "errorMessage": "", "results": results, "statusCode": "OK"}


class TestShorten:
    def test_returns_short_url_keyed_by_long_url(self, transport):
        stub = transport(ok({"http://example.com": {"shortUrl": "http://bit.ly/abcde"}}))
        bitly = Bitly("u", "k", transport=stub)

        assert bitly.shorten("http://example.com") == "http://bit.ly/abcde"
        assert "/shorten?version=2.0.1&longUrl=http://example.com&" in stub.last_url

    def test_long_url_is_not_normalized(self, transport):
        stub = transport(ok({"http://example.com": {"shortUrl": "http://bit.ly/abcde"}}))
        bitly = Bitly("u", "k", transport=stub)

        result = bitly.shorten("http://example.com/")
        assert result["errorCode"] == 0

    def test_error_returns_envelope(self, transport):
        bitly = Bitly("u", "k", transport=transport(ERROR_ENVELOPE))
        assert bitly.shorten("http://example.com") == ERROR_ENVELOPE


class TestExpand:
    def test_short_url(self, transport):
        stub = transport({"errorCode": 0, "results": {"abcde": {"longUrl": "http://example.com"}}})
        bitly = Bitly("u", "k", transport=stub)

        assert bitly.expand("http://bit.ly/abcde") == "http://example.com"
        assert "&shortUrl=http://bit.ly/abcde&" in stub.last_url
        assert "hash=" not in stub.last_url

    def test_hash(self, transport):
        stub = transport(ok({"abcde": {"longUrl": "http://example.com"}}))
        bitly = Bitly("u", "k", transport=stub)

        assert bitly.expand("abcde") == "http://example.com"
        assert "&hash=abcde&" in stub.last_url

    def test_error_returns_envelope(self, transport):
        bitly = Bitly("u", "k", transport=transport(ERROR_ENVELOPE))
        assert bitly.expand("abcde") == ERROR_ENVELOPE


class TestInfo:
    def test_returns_whole_results(self, transport):
        stub = transport(ok(INFO_RESULTS))
        bitly = Bitly("u", "k", transport=stub)

        assert bitly.info("http://bit.ly/FGHiJ") == INFO_RESULTS
        assert "&shortUrl=http://bit.ly/FGHiJ&" in stub.last_url
        assert "hash=" not in stub.last_url

    def test_results_not_indexed_by_requested_hash(self, transport):
        results = {**INFO_RESULTS, "other": {"htmlTitle": "Other"}}
        bitly = Bitly("u", "k", transport=transport(ok(results)))
        assert bitly.info("FGHiJ") == results

    def test_fields_sent_as_keys(self, transport):
        stub = transport(ok(INFO_RESULTS))
        bitly = Bitly("u", "k", transport=stub)

        bitly.info("FGHiJ", "htmlTitle,thumbnail")
        assert "/info?version=2.0.1&hash=FGHiJ&keys=htmlTitle,thumbnail&login=u" in stub.last_url

    def test_no_fields_no_keys(self, transport):
        stub = transport(ok(INFO_RESULTS))
        Bitly("u", "k", transport=stub).info("FGHiJ")
        assert "keys=" not in stub.last_url


class TestStats:
    def test_returns_whole_results(self, transport):
        stub = transport(ok(STATS_RESULTS))
        bitly = Bitly("u", "k", transport=stub)

        assert bitly.stats("FGHiJ") == STATS_RESULTS
        assert "/stats?version=2.0.1&hash=FGHiJ&" in stub.last_url

    def test_short_url(self, transport):
        stub = transport(ok(STATS_RESULTS))
        Bitly("u", "k", transport=stub).stats("http://bit.ly/FGHiJ")
        assert "&shortUrl=http://bit.ly/FGHiJ&" in stub.last_url


class TestErrors:
    def test_returns_catalog(self, transport):
        catalog = [{"errorCode": 203, "errorMessage": "auth", "statusCode": "ERROR"}]
        stub = transport(ok(catalog))
        bitly = Bitly("u", "k", transport=stub)

        assert bitly.errors() == catalog
        assert stub.last_url == "http://api.bit.ly/errors?version=2.0.1&login=u&apiKey=k"


class TestRequest:
    @pytest.mark.parametrize(
        "call",
        [
            lambda b: b.shorten("http://example.com"),
            lambda b: b.expand("http://bit.ly/abcde"),
            lambda b: b.info("abcde", "htmlTitle"),
            lambda b: b.stats("abcde"),
            lambda b: b.errors(),
        ],
    )
    def test_credentials_and_version_once(self, transport, call):
        stub = transport(ERROR_ENVELOPE)
        call(Bitly("u", "k", transport=stub))

        url = stub.last_url
        assert url.count("login=u") == 1
        assert url.count("apiKey=k") == 1
        assert url.count("version=2.0.1") == 1
        assert url.endswith("&login=u&apiKey=k")

    @pytest.mark.parametrize(
        "call",
        [
            lambda b: b.shorten("http://example.com"),
            lambda b: b.expand("abcde"),
            lambda b: b.info("abcde"),
            lambda b: b.stats("abcde"),
            lambda b: b.errors(),
        ],
    )
    def test_transport_failure_returns_empty(self, failing_transport, call):
        result = call(Bitly("u", "k", transport=failing_transport))
        assert result == {}
        assert result.get("errorCode") != 0

    def test_malformed_body_returns_empty(self, transport):
        bitly = Bitly("u", "k", transport=transport("<html>502</html>"))
        assert bitly.expand("abcde") == {}

    def test_custom_version_and_api_url(self, transport):
        stub = transport(ERROR_ENVELOPE)
        Bitly("u", "k", version="3", api_url="http://localhost:5002", transport=stub).errors()
        assert stub.last_url.startswith("http://localhost:5002/errors?version=3&")

    def test_failure_log_hides_api_key(self, caplog):
        def leaky(url):
            raise APIError(f"Request failed for url: {url}")

        Bitly("u", "s3cr3t", transport=leaky).errors()
        assert "bit.ly request" in caplog.text
        assert "s3cr3t" not in caplog.text


class TestFetchBody:
    @patch("api_client.requests.get")
    def test_returns_text(self, mock_get):
        mock_get.return_value = MagicMock(text='{"errorCode": 0}')

        assert fetch_body("http://api.bit.ly/errors", timeout=3) == '{"errorCode": 0}'
        mock_get.assert_called_once_with("http://api.bit.ly/errors", timeout=3)

    @patch("api_client.requests.get")
    def test_http_error_raises_api_error(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_get.return_value = response

        with pytest.raises(APIError):
            fetch_body("http://api.bit.ly/errors")

    @patch("api_client.requests.get")
    def test_network_error_raises_api_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(APIError):
            fetch_body("http://api.bit.ly/errors")

    @patch("api_client.requests.get")
    def test_default_transport_failure_is_swallowed(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")
        assert Bitly("u", "k").stats("abcde") == {}


@pytest.mark.parametrize(
    "call",
    [
        lambda b: b.shorten("http://example.com"),
        lambda b: b.expand("http://bit.ly/abcde"),
        lambda b: b.info("http://bit.ly/abcde", "htmlTitle"),
        lambda b: b.stats("abcde"),
        lambda b: b.errors(),
    ],
)
def test_error_code_returns_full_envelope(transport, call):
    envelope = {"errorCode": 1101, "errorMessage": "Unknown hash", "statusCode": "ERROR"}
    assert call(Bitly("u", "k", transport=transport(envelope))) == envelope
