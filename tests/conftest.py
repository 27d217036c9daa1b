"""
Shared fixtures: a fetcher serving canned pages, so no test touches the network.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from compat_scanner.errors import HttpError
from compat_scanner.fetcher import Fetcher, FetchResult
from compat_scanner.website import WebsiteContext

PAGE_URL = "http://test/a.html"


class FakeFetcher(Fetcher):
    """Serves ``pages`` ({url: body | FetchResult | Exception}); anything else is a 404."""

    def __init__(self, pages=None, auth=None):
        super().__init__(auth=auth)
        self.pages = dict(pages or {})
        self.requests = []
        self.request_headers = []
        self.closed = False

    def get(self, url, headers=None):
        self.requests.append(url)
        self.request_headers.append(headers)
        page = self.pages.get(url)
        if page is None:
            raise HttpError("Error found: HTTP 404", url=url, status_code=404)
        if isinstance(page, Exception):
            raise page
        if isinstance(page, FetchResult):
            return page
        return FetchResult(url=url, status_code=200, headers={"content-type": "text/html"}, body=page)

    def close(self):
        self.closed = True
        super().close()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def make_website():
    def _make(html, pages=None, url=PAGE_URL, css_rules=()):
        fetcher = FakeFetcher(pages)
        return WebsiteContext.from_html(url, html, fetcher=fetcher, css_rules=list(css_rules))

    return _make


@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    from main import app

    with TestClient(app) as test_client:
        yield test_client
