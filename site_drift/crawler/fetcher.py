# site_drift/crawler/fetcher.py
"""
Fetcher module: retrieves page HTML for the crawl and diff engines.

A fetcher returns the page markup, ``None`` when the site reports the page as
missing, and raises :class:`~site_drift.errors.FetchError` on transport
failures. Both implementations are async context managers owning their
client resources for the duration of a run.
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional, Protocol, Sequence, Union

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_drift.config import CrawlConfig
from site_drift.crawler.link_extractor import is_not_found
from site_drift.errors import FetchError
from site_drift.logger import logger

if TYPE_CHECKING:
    from site_drift.crawler.browser import BrowserFetcher


class PageFetcher(Protocol):
    """Anything that can turn a URL into rendered HTML."""

    async def fetch(self, url: str) -> Optional[str]:
        ...


class HttpFetcher:
    """Plain HTTP fetcher (no client-side rendering) with retry/backoff on 5xx and 429."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(
        self,
        config: CrawlConfig,
        session: Optional[ClientSession] = None,
        backoff_base: float = 1.0,
    ) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._backoff_base = backoff_base

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.fetch_timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        if self._owns_session:
            self.session = None

    async def fetch(self, url: str) -> Optional[str]:
        """
        GET *url* and return its HTML.

        Returns None on 404, on non-HTML responses and on pages showing the
        configured not-found marker.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status == 404:
                        return None
                    if resp.status in self._RETRY_STATUS:
                        raise ClientError(f"retryable status {resp.status}")
                    if resp.status >= 400:
                        raise FetchError(url, f"HTTP {resp.status}")
                    ctype = resp.headers.get("Content-Type", "").lower()
                    if "html" not in ctype:
                        logger.debug("Skipping non-HTML %s (%s)", url, ctype or "no content type")
                        return None
                    # bytes invalid for the charset become U+FFFD
                    html = await resp.text(errors="replace")
                    break
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise FetchError(url, "timeout") from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.config.retry_times:
                    raise FetchError(url, str(exc)) from exc
                backoff = min(self._backoff_base * 2**attempts, 60)
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff)
                await asyncio.sleep(backoff)

        if is_not_found(html, self.config.not_found_selector, self.config.not_found_text):
            return None
        return html


def open_fetcher(config: CrawlConfig) -> Union[HttpFetcher, BrowserFetcher]:
    """Build the fetcher selected by ``config.renderer``; use it with ``async with``."""
    if config.renderer == "http":
        return HttpFetcher(config)
    # Playwright is only imported when a browser is actually requested
    from site_drift.crawler.browser import BrowserFetcher

    return BrowserFetcher(config)


__all__ = ["PageFetcher", "HttpFetcher", "open_fetcher"]
