# File: tests/conftest.py
from __future__ import annotations

from html import escape
from typing import AsyncIterator, Dict, List, Optional, Tuple, Union

import pytest
from aiohttp import web

from site_drift.config import CrawlConfig
from site_drift.events import RecordingSink
from site_drift.logger import init_logging

ORIGIN = "https://docs.example/"

PageValue = Union[str, None, Exception]


def page(title: str, *links: Tuple[str, str]) -> str:
    """Rendered documentation page with a header title and (href, text) anchors."""
    anchors = "".join(f'<a href="{escape(href)}">{escape(text)}</a>' for href, text in links)
    return (
        "<html><body>"
        f"<header><h1>{escape(title)}</h1></header>"
        f"<nav>{anchors}</nav>"
        "</body></html>"
    )


class FakeFetcher:
    """
    In-memory site: url -> HTML, ``None`` (not found) or an exception to raise.
    Unknown URLs are reported as not found.
    """

    def __init__(self, pages: Dict[str, PageValue]) -> None:
        self.pages = dict(pages)
        self.calls: List[str] = []

    async def fetch(self, url: str) -> Optional[str]:
        self.calls.append(url)
        value = self.pages.get(url)
        if isinstance(value, Exception):
            raise value
        return value


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests rebind the project logger to CliRunner streams; restore it afterwards."""
    yield
    init_logging()


@pytest.fixture()
def config(tmp_path) -> CrawlConfig:
    """Crawl settings for the synthetic docs.example site, without delays."""
    return CrawlConfig(
        base_url=ORIGIN,
        rate_limit_delay=0,
        max_depth=5,
        fetch_timeout=2.0,
        renderer="http",
        snapshots_dir=tmp_path / "snapshots",
    )


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def docs_site() -> FakeFetcher:
    """
    Three-page site: / links to /guide and /api; /guide links back to / and
    to an external page.
    """
    return FakeFetcher(
        {
            ORIGIN: page("Home", ("/guide", "Guide"), ("/api", "API")),
            f"{ORIGIN}guide": page("Guide", ("/", "Home"), ("http://external.example/", "External")),
            f"{ORIGIN}api": page("API Reference"),
        }
    )


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


# bytes that are not valid UTF-8 although the response claims utf-8
BROKEN_BODY = b"<html>\xff\xfe\xfa broken</html>"


def mixed_encoding_app() -> web.Application:
    """/ links to a page with undecodable bytes and to a healthy page."""
    app = web.Application()

    async def root(_):
        return web.Response(
            text='<header><h1>Home</h1></header><a href="/bad">Bad</a><a href="/ok">OK</a>',
            content_type="text/html",
        )

    async def bad(_):
        return web.Response(body=BROKEN_BODY, headers={"Content-Type": "text/html; charset=utf-8"})

    async def ok(_):
        return web.Response(text="<header><h1>OK</h1></header>", content_type="text/html")

    app.router.add_get("/", root)
    app.router.add_get("/bad", bad)
    app.router.add_get("/ok", ok)
    return app
