from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Any, Callable
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from loguru import logger

FIXTURES = Path(__file__).parent / "fixtures"

BASE_URL = "https://www.quandl.com"
API_KEY = "test-key"


def fixture_bytes(name: str) -> bytes:
    return (FIXTURES / name).read_bytes()


class FakeResponse:
    def __init__(self, body: bytes | str, status_code: int = 200) -> None:
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.status_code = status_code
        self.closed = False

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def close(self) -> None:
        self.closed = True

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]


class FakeSession:
    """Stands in for requests.Session; routes by URL path, records every URL."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.calls: list[str] = []

    def get(self, url: str, timeout: Any = None, stream: bool = False) -> FakeResponse:
        self.calls.append(url)
        parts = urlsplit(url)
        route = self.routes.get(parts.path)
        if route is None:
            return FakeResponse("not found", status_code=404)
        if callable(route):
            route = route(parse_qs(parts.query))
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)

    def queries(self) -> list[dict[str, list[str]]]:
        return [parse_qs(urlsplit(url).query) for url in self.calls]


def make_zip(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, body in entries.items():
            archive.writestr(name, body)
    return buffer.getvalue()


def database_pages(pages: dict[int, str]) -> Callable[[dict], bytes]:
    """Route handler serving databases.csv pages; unknown pages are empty."""

    def handler(query: dict[str, list[str]]) -> bytes:
        page = int(query["page"][0])
        return fixture_bytes(pages.get(page, "databases_empty.csv"))

    return handler


@pytest.fixture
def wiki_routes() -> dict[str, Any]:
    codes_zip = make_zip(
        {
            "WIKI-datasets-codes-1.csv": fixture_bytes("wiki_codes_part1.csv"),
            "WIKI-datasets-codes-2.csv": fixture_bytes("wiki_codes_part2.csv"),
        }
    )
    return {
        "/api/v3/datasets/WIKI/AAPL.csv": fixture_bytes("wiki_aapl.csv"),
        "/api/v3/datasets/WIKI/AAPL/metadata.json": fixture_bytes(
            "wiki_aapl_metadata.json"
        ),
        "/api/v3/databases/WIKI/codes.csv": codes_zip,
        "/api/v3/databases.csv": database_pages(
            {0: "databases_page0.csv", 1: "databases_page1.csv"}
        ),
    }


@pytest.fixture
def session(wiki_routes) -> FakeSession:
    return FakeSession(wiki_routes)


@pytest.fixture
def source(session):
    from quandl_app.ingestion.quandl import QuandlSource

    return QuandlSource(api_key=API_KEY, base_url=BASE_URL, session=session)


@pytest.fixture(autouse=True)
def temp_downloads(tmp_path, monkeypatch) -> list:
    """Keep ZIP downloads in tmp_path and capture exit-time deletions."""
    import atexit
    import tempfile

    download_dir = tmp_path / "downloads"
    download_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(download_dir))
    registered: list = []
    monkeypatch.setattr(atexit, "register", lambda fn, *args: registered.append((fn, args)))
    return registered


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
