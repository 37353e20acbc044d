"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List

from starchart.config import DEFAULT_SWAPI_BASE, DEFAULT_WIKI_API
from starchart.http import FetchError
from starchart.logger import configure_logger, reset_logger


class FakeClient:
    """
    In-memory stand-in for HttpClient.

    Wiki requests are answered from ``wiki_pages`` (title -> image URL) and
    ``wiki_search`` (query -> titles); everything else from ``json_routes``
    and ``text_routes`` keyed by URL. A value that is an exception is raised.
    Unknown URLs behave like a 404.
    """

    def __init__(self):
        self.json_routes: Dict[str, Any] = {}
        self.text_routes: Dict[str, Any] = {}
        self.wiki_pages: Dict[str, Any] = {}
        self.wiki_search: Dict[str, Any] = {}
        self.calls: List[tuple] = []

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value

    def _wiki(self, params: Dict[str, Any]):
        if params.get("list") == "search":
            query = params["srsearch"]
            titles = self._answer(self.wiki_search.get(query, []))
            return {"query": {"search": [{"title": t} for t in titles]}}
        title = params["titles"]
        if title not in self.wiki_pages:
            return {"query": {"pages": {"-1": {"title": title, "missing": ""}}}}
        image = self._answer(self.wiki_pages[title])
        return {"query": {"pages": {"42": {"title": title, "thumbnail": {"source": image}}}}}

    def get_json(self, url, params=None, source="http"):
        self.calls.append(("json", url, dict(params or {})))
        if url == DEFAULT_WIKI_API and params:
            return self._wiki(params)
        if url not in self.json_routes:
            raise FetchError(f"{source} URL not found (404): {url}")
        return self._answer(self.json_routes[url])

    def get_text(self, url, params=None, source="http"):
        self.calls.append(("text", url, dict(params or {})))
        if url not in self.text_routes:
            raise FetchError(f"{source} URL not found (404): {url}")
        return self._answer(self.text_routes[url])

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def urls(self, kind: str) -> List[str]:
        return [url for k, url, _ in self.calls if k == kind]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Use a console-less, file-less logger for every test."""
    logger = configure_logger(name="starchart-test", enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


def _make_ship(ship_id: int, name: str, **extra) -> Dict[str, Any]:
    ship = {"name": name, "url": f"{DEFAULT_SWAPI_BASE}{ship_id}/", "model": f"{name} model"}
    ship.update(extra)
    return ship


@pytest.fixture
def two_page_catalog(fake_client) -> FakeClient:
    """Catalog with two pages: CR90 corvette and Star Destroyer, then X-wing."""
    page2 = f"{DEFAULT_SWAPI_BASE}?page=2"
    fake_client.json_routes[DEFAULT_SWAPI_BASE] = {
        "count": 3,
        "next": page2,
        "results": [_make_ship(2, "CR90 corvette"), _make_ship(3, "Star Destroyer")],
    }
    fake_client.json_routes[page2] = {
        "count": 3,
        "next": None,
        "results": [_make_ship(12, "X-wing")],
    }
    return fake_client


@pytest.fixture
def databank_html() -> str:
    """Databank page with the hero image buried in markup."""
    return """
    <html>
    <head><meta property="og:image" content="https://lumiere-a.akamaihd.net/v1/images/x-wing_fighter_1920x1080.jpeg?region=0%2C0%2C1536%2C864"></head>
    <body><img src="https://example.com/not-this.png"></body>
    </html>
    """


@pytest.fixture
def make_ship():
    """Factory for catalog records: make_ship(id, name, **fields)."""
    return _make_ship
