import json

import httpx
from loguru import logger
import pytest

from playsource.infrastructure.connectors.http import HttpSession


class FakeBandcamp:
    """Routes requests of an httpx.MockTransport to canned pages.

    `pages` maps URLs to HTML bodies or to an HTTP status for failures.
    """

    def __init__(self, pages=None, search=None, search_status=200):
        self.pages = dict(pages or {})
        self.search = search
        self.search_status = search_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if self.search is None:
                return httpx.Response(self.search_status)
            return httpx.Response(self.search_status, json=self.search)

        url = str(request.url)
        body = self.pages.get(url, self.pages.get(url.rstrip("/")))
        if body is None:
            return httpx.Response(404)
        if isinstance(body, int):
            return httpx.Response(body)
        return httpx.Response(200, text=body, headers={"content-type": "text/html"})

    @property
    def search_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    @property
    def fetched(self) -> list[str]:
        return [str(r.url).rstrip("/") for r in self.requests if r.method == "GET"]


@pytest.fixture
def fake_bandcamp():
    return FakeBandcamp()


@pytest.fixture
def http_session(fake_bandcamp):
    """HttpSession whose requests are served by `fake_bandcamp`."""
    return HttpSession(transport=httpx.MockTransport(fake_bandcamp))


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
