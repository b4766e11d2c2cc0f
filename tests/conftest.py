"""Pytest configuration and fixtures."""

import json
from urllib.parse import urlsplit

import pytest

import dummy_bitly_api
from api_client import APIError


class RecordingTransport:
    """Transport stub returning a canned body and remembering requested URLs."""

    def __init__(self, body=None, error=None):
        self.body = body
        self.error = error
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return json.dumps(self.body)
        return self.body

    @property
    def last_url(self):
        return self.urls[-1]


@pytest.fixture
def transport():
    """Factory for recording transports."""

    def make(body=None, error=None):
        return RecordingTransport(body=body, error=error)

    return make


@pytest.fixture
def failing_transport():
    """Transport that always fails like a network error."""
    return RecordingTransport(error=APIError("Request failed: connection refused"))


@pytest.fixture
def stub_api_transport():
    """Transport that serves requests from the Flask stub API in-process."""
    client = dummy_bitly_api.app.test_client()

    def serve(url):
        parts = urlsplit(url)
        response = client.get(f"{parts.path}?{parts.query}")
        if response.status_code >= 400:
            raise APIError(f"HTTP error {response.status_code}")
        return response.get_data(as_text=True)

    return serve


@pytest.fixture
def seeded_hash():
    """Hash of a link the stub API was seeded with."""
    return next(iter(dummy_bitly_api.LINKS))
