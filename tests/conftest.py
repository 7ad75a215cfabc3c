import dataclasses
import json
import logging
import sys
from pathlib import Path

import pytest
import requests
from requests.structures import CaseInsensitiveDict

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from comic.context import RunContext, Settings


class FakeResponse:
    def __init__(self, status_code=200, text="", content=None, headers=None):
        self.status_code = status_code
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")
        self.headers = CaseInsensitiveDict(headers or {})

    @property
    def ok(self):
        return 200 <= self.status_code < 400


class FakeSession:
    """Answers requests from a url -> response (or exception) table and records calls."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def _answer(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if url not in self.routes:
            raise AssertionError(f"unexpected {method} {url}")
        answer = self.routes[url]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def get(self, url, **kwargs):
        return self._answer("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._answer("POST", url, **kwargs)

    def urls(self, method=None):
        return [url for m, url, _ in self.calls if method is None or m == method]


def scraper_response(selector, entries, status_code=200):
    return FakeResponse(status_code, json.dumps({"result": {selector: entries}}))


def image_response(body=b"\x89PNG fake", content_type="image/png", status_code=200):
    return FakeResponse(status_code, content=body, headers={"Content-Type": content_type})


def strip_block(**overrides):
    data = {
        "@context": "https://schema.org",
        "@type": "ImageObject",
        "name": "Calvin and Hobbes by Bill Watterson for March 14, 2025",
        "description": "Calvin and Hobbes comic strip",
        "url": "https://www.gocomics.com/calvinandhobbes/2025/3/14",
        "contentUrl": "https://featureassets.gocomics.com/assets/strip.png",
        "datePublished": "March 14, 2025",
        "representativeOfPage": True,
        "author": {"@type": "Person", "name": "Bill Watterson"},
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def settings():
    return Settings(comic_slug="calvinandhobbes", webhook_id="123", webhook_token="tok")


@pytest.fixture
def make_ctx(settings):
    def _make(routes=None, **overrides):
        s = dataclasses.replace(settings, **overrides)
        return RunContext.create(s, logger=logging.getLogger("test_daily_comic"), session=FakeSession(routes))

    return _make


@pytest.fixture
def request_error():
    return requests.ConnectionError("connection reset")
