"""Shared fixtures: a fake requests session and OAuth header helpers."""
import json
import threading
from unittest.mock import MagicMock
from urllib.parse import unquote

import pytest
import requests

from twitter_rest.auth import CredentialStore
from twitter_rest.pipeline import RequestPipeline

PREFIX = "https://api.twitter.com/1.1/"


def make_response(status_code=200, body=b"", url="https://api.twitter.com/1.1/x.json"):
    response = requests.Response()
    response.status_code = status_code
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    response.url = url
    response.encoding = "utf-8"
    return response


def parse_authorization_header(value):
    assert value.startswith("OAuth ")
    params = {}
    for item in value[len("OAuth "):].split(", "):
        key, _, quoted = item.partition("=")
        params[unquote(key)] = unquote(quoted.strip('"'))
    return params


class FakeSession:
    """Records every request and answers with queued (or a default) response."""

    def __init__(self, *responses, default=None):
        self.responses = list(responses)
        self.default = default
        self.calls = []
        self._lock = threading.Lock()
        self.request = MagicMock(side_effect=self._request)
        self.post = MagicMock(side_effect=lambda url, **kw: self._request("POST", url, **kw))

    def _request(self, method, url, **kwargs):
        with self._lock:
            self.calls.append({"method": method, "url": url, **kwargs})
            if self.responses:
                response = self.responses.pop(0)
            else:
                response = self.default
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(method, url, **kwargs)
        return response


@pytest.fixture
def store():
    return CredentialStore("consumer-key", "consumer-secret", "user-token", "user-secret")


@pytest.fixture
def session():
    return FakeSession(default=make_response(200, {"ok": True}))


@pytest.fixture
def pipeline(store, session):
    return RequestPipeline(store, session=session, prefix=PREFIX, timeout=5, debug=False)
