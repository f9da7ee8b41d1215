# File: site_drift/diff.py
"""site_drift.diff: reconcile a stored snapshot tree against the live site.

The differ visits every node of the snapshot exactly once, re-fetches the
page and classifies it as missing, retitled, or confirmed. It never discovers
pages the snapshot does not already contain.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set
from urllib.parse import urlparse

from site_drift.config import CrawlConfig
from site_drift.crawler.fetcher import PageFetcher
from site_drift.crawler.link_extractor import DEFAULT_TITLE_SELECTOR, extract_title
from site_drift.crawler.models import SiteNode
from site_drift.errors import FetchError
from site_drift.events import EventSink, LoggingSink

__all__ = ["TitleChange", "DiffResult", "SnapshotDiffer", "resolve_node_url", "compare_snapshot"]

Sleep = Callable[[float], Awaitable[None]]


@dataclass(slots=True, frozen=True)
class TitleChange:
    recorded: str
    live: str


@dataclass(slots=True)
class DiffResult:
    """Drift between a snapshot and the live site, keyed by absolute URL."""

    missing_pages: Set[str] = field(default_factory=set)
    retitled_pages: Set[str] = field(default_factory=set)
    title_changes: Dict[str, TitleChange] = field(default_factory=dict)
    checked: int = 0

    @property
    def has_drift(self) -> bool:
        return bool(self.missing_pages or self.retitled_pages)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form with sorted URL lists."""
        return {
            "checked": self.checked,
            "missing_pages": sorted(self.missing_pages),
            "retitled_pages": sorted(self.retitled_pages),
            "title_changes": {
                url: {"recorded": change.recorded, "live": change.live}
                for url, change in sorted(self.title_changes.items())
            },
        }


def resolve_node_url(url: str, base_url: str, snapshot_root: Optional[str] = None) -> str:
    """Absolute URL to fetch for a recorded node *url*.

    URLs under *snapshot_root* are rebased onto *base_url*, so a snapshot of
    production can be checked against another deployment. Other absolute URLs
    are returned unchanged; relative ones are appended to *base_url*.
    """
    if snapshot_root and url.startswith(snapshot_root):
        url = url[len(snapshot_root):]
    if urlparse(url).scheme:
        return url
    return base_url.rstrip("/") + "/" + url.lstrip("/")


class SnapshotDiffer:
    """Depth-first reconciliation of a snapshot tree with live fetches."""

    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        title_selector: str = DEFAULT_TITLE_SELECTOR,
        rate_limit_delay: float = 0.0,
        fetch_timeout: float = 30.0,
        sink: Optional[EventSink] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.title_selector = title_selector
        self.rate_limit_delay = rate_limit_delay
        self.fetch_timeout = fetch_timeout
        self.sink: EventSink = sink or LoggingSink()
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        config: CrawlConfig,
        fetcher: PageFetcher,
        *,
        sink: Optional[EventSink] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> SnapshotDiffer:
        return cls(
            fetcher,
            title_selector=config.title_selector,
            rate_limit_delay=config.delay_seconds,
            fetch_timeout=config.fetch_timeout,
            sink=sink,
            sleep=sleep,
        )

    async def diff(self, tree: SiteNode, base_url: str) -> DiffResult:
        start = time.monotonic()
        result = DiffResult()
        stack: List[SiteNode] = [tree]
        self.sink.emit("diff_started", snapshot=tree.url, base_url=base_url, nodes=tree.count())

        while stack:
            node = stack.pop()
            url = resolve_node_url(node.url, base_url, tree.url)
            # children first: the whole tree is visited whatever this fetch yields
            stack.extend(node.children)
            result.checked += 1

            html = await self._fetch(url)
            if html is None:
                result.missing_pages.add(url)
                self.sink.emit("page_missing", url=url)
                continue

            live_title = extract_title(html, self.title_selector)
            if live_title != node.title:
                result.retitled_pages.add(url)
                result.title_changes[url] = TitleChange(recorded=node.title, live=live_title)
                self.sink.emit("page_retitled", url=url, recorded=node.title, live=live_title)
            else:
                self.sink.emit("page_checked", url=url)

        self.sink.emit(
            "diff_finished",
            checked=result.checked,
            missing=len(result.missing_pages),
            retitled=len(result.retitled_pages),
            duration=round(time.monotonic() - start, 2),
        )
        return result

    async def _fetch(self, url: str) -> Optional[str]:
        """Rendered HTML of *url*, or None for any failure (missing, transport, timeout)."""
        await self._sleep(self.rate_limit_delay)
        try:
            return await asyncio.wait_for(self.fetcher.fetch(url), timeout=self.fetch_timeout)
        except FetchError as exc:
            self.sink.emit("page_failed", url=url, reason=exc.reason)
        except asyncio.TimeoutError:
            self.sink.emit("page_failed", url=url, reason="timeout")
        return None


async def compare_snapshot(
    tree: SiteNode,
    base_url: str,
    fetcher: PageFetcher,
    config: Optional[CrawlConfig] = None,
    sink: Optional[EventSink] = None,
) -> DiffResult:
    """Diff *tree* against *base_url*; settings come from *config* when given."""
    if config is None:
        differ = SnapshotDiffer(fetcher, sink=sink)
    else:
        differ = SnapshotDiffer.from_config(config, fetcher, sink=sink)
    return await differ.diff(tree, base_url)
