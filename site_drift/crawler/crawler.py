# === FILE: site_drift/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional
from urllib.parse import urljoin, urlparse

from site_drift.config import CrawlConfig
from site_drift.crawler.fetcher import PageFetcher
from site_drift.crawler.frontier import FrontierQueue, VisitedSet
from site_drift.crawler.link_extractor import parse_page
from site_drift.crawler.models import CrawlStats, Link, SiteNode
from site_drift.errors import FetchError
from site_drift.events import EventSink, LoggingSink
from site_drift.utils import normalize_url

__all__ = ("SiteCrawler", "crawl_site")

Sleep = Callable[[float], Awaitable[None]]

# in-page anchors, mail, phone and script links never become pages
_EXCLUDED_PREFIXES = ("#", "mailto:", "tel:", "javascript:")
_PAGE_SCHEMES = ("http", "https")


class SiteCrawler:
    """Sequential breadth-first crawler that builds a spanning tree of one documentation site.

    Every URL is enqueued at most once (first discoverer wins), so the
    resulting tree holds a single path to each reachable page.
    """

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: PageFetcher,
        *,
        sink: Optional[EventSink] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.sink: EventSink = sink or LoggingSink()
        self.origin = config.origin
        self.visited = VisitedSet()
        self.stats = CrawlStats()
        self._sleep = sleep

    async def crawl(self) -> SiteNode:
        start = time.monotonic()
        root = SiteNode(url=self.origin)
        self.visited = VisitedSet([self.origin])
        self.stats = CrawlStats()
        frontier = FrontierQueue([root])
        self.sink.emit(
            "crawl_started",
            url=self.origin,
            max_depth=self.config.max_depth,
            rate_limit_delay=self.config.rate_limit_delay,
        )

        while frontier:
            node = frontier.pop()
            if node.depth > self.config.max_depth:
                self.stats.pages_skipped += 1
                self.sink.emit("page_skipped", url=node.url, depth=node.depth)
                continue
            html = await self._fetch(node)
            if html is not None:
                self._expand(node, html, frontier)

        self.stats.duration = time.monotonic() - start
        self.sink.emit(
            "crawl_finished",
            url=self.origin,
            pages=self.stats.pages_fetched,
            failed=self.stats.pages_failed,
            skipped=self.stats.pages_skipped,
            visited=len(self.visited),
            duration=round(self.stats.duration, 2),
        )
        return root

    async def _fetch(self, node: SiteNode) -> Optional[str]:
        await self._sleep(self.config.delay_seconds)
        try:
            html = await asyncio.wait_for(self.fetcher.fetch(node.url), timeout=self.config.fetch_timeout)
        except FetchError as exc:
            reason = exc.reason
        except asyncio.TimeoutError:
            reason = "timeout"
        else:
            if html is not None:
                self.stats.pages_fetched += 1
                self.sink.emit("page_fetched", url=node.url, depth=node.depth)
                return html
            reason = "not found"
        self.stats.pages_failed += 1
        self.sink.emit("page_failed", url=node.url, depth=node.depth, reason=reason)
        return None

    def _expand(self, node: SiteNode, html: str, frontier: FrontierQueue) -> None:
        page = parse_page(html, node.url, self.config.title_selector)
        node.title = page.title
        for link in page.links:
            url = self._resolve(link, page.base_url, node)
            if url is None:
                continue
            # origin check first: foreign URLs must not enter the visited set
            if not url.startswith(self.origin) or not self.visited.add(url):
                continue
            frontier.push(node.add_child(url))

    def _resolve(self, link: Link, base_url: str, node: SiteNode) -> Optional[str]:
        href = link.href
        if not href or not link.text or href.lower().startswith(_EXCLUDED_PREFIXES):
            return None
        try:
            url = normalize_url(urljoin(base_url, href))
        except ValueError as exc:
            self.stats.links_malformed += 1
            self.sink.emit("link_malformed", href=href, page=node.url, error=str(exc))
            return None
        if urlparse(url).scheme not in _PAGE_SCHEMES:
            return None
        return url


async def crawl_site(
    config: CrawlConfig,
    fetcher: PageFetcher,
    sink: Optional[EventSink] = None,
) -> SiteNode:
    """Crawl ``config.base_url`` with *fetcher* and return the site tree."""
    return await SiteCrawler(config, fetcher, sink=sink).crawl()
