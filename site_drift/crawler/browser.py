# site_drift/crawler/browser.py
"""
Headless Chromium fetcher: returns the DOM after client-side rendering.
"""
from __future__ import annotations

from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from site_drift.config import CrawlConfig
from site_drift.crawler.link_extractor import is_not_found
from site_drift.errors import FetchError
from site_drift.logger import logger


class BrowserFetcher:
    """One browser per run, one tab per fetch."""

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> BrowserFetcher:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True)
        self._context = await self._browser.new_context(user_agent=self.config.user_agent)
        logger.debug("Chromium started for %s", self.config.base_url)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def fetch(self, url: str) -> Optional[str]:
        """Render *url*; None when the rendered page is the site's not-found page."""
        if self._context is None:
            raise RuntimeError("Browser not started")

        page: Optional[Page] = None
        try:
            page = await self._context.new_page()
            response = await page.goto(
                url,
                wait_until="load",
                timeout=self.config.fetch_timeout * 1000,
            )
            if response is not None and response.status == 404:
                return None
            html = await page.content()
        except PlaywrightError as exc:
            raise FetchError(url, exc.message) from exc
        finally:
            if page is not None:
                await page.close()

        if is_not_found(html, self.config.not_found_selector, self.config.not_found_text):
            return None
        return html


__all__ = ["BrowserFetcher"]
