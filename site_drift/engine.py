# File: site_drift/engine.py
"""site_drift.engine: orchestration of snapshot and diff runs for the CLI and tests."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from site_drift.config import CrawlConfig
from site_drift.crawler.crawler import SiteCrawler
from site_drift.crawler.fetcher import PageFetcher, open_fetcher
from site_drift.crawler.models import CrawlStats, SiteNode
from site_drift.diff import DiffResult, SnapshotDiffer
from site_drift.events import EventSink
from site_drift.logger import logger
from site_drift.snapshot import SnapshotStore
from site_drift.utils import snapshot_identifier

__all__ = ["SnapshotRun", "take_snapshot", "check_drift"]


@dataclass(slots=True)
class SnapshotRun:
    """Outcome of a snapshot run: where the tree was written and crawl counters."""

    path: Path
    tree: SiteNode
    stats: CrawlStats


@asynccontextmanager
async def _fetcher_for(config: CrawlConfig, fetcher: Optional[PageFetcher]) -> AsyncIterator[PageFetcher]:
    """Use the caller's fetcher as-is, otherwise open the configured one for the run."""
    if fetcher is not None:
        yield fetcher
        return
    async with open_fetcher(config) as opened:
        yield opened


async def take_snapshot(
    config: CrawlConfig,
    *,
    fetcher: Optional[PageFetcher] = None,
    revision: Optional[str] = None,
    sink: Optional[EventSink] = None,
) -> SnapshotRun:
    """Crawl ``config.base_url`` and store the tree under ``config.snapshots_dir``."""
    logger.info("Starting crawl of %s (max depth %d)", config.base_url, config.max_depth)
    async with _fetcher_for(config, fetcher) as opened:
        crawler = SiteCrawler(config, opened, sink=sink)
        tree = await crawler.crawl()

    store = SnapshotStore(config.snapshots_dir)
    path = store.save(tree, snapshot_identifier(str(config.base_url), revision))
    return SnapshotRun(path=path, tree=tree, stats=crawler.stats)


async def check_drift(
    snapshot_path: Union[str, Path],
    base_url: str,
    config: CrawlConfig,
    *,
    fetcher: Optional[PageFetcher] = None,
    sink: Optional[EventSink] = None,
) -> DiffResult:
    """Load a snapshot and reconcile it with the site at *base_url*.

    Snapshot errors propagate before any fetcher is opened.
    """
    tree = SnapshotStore(config.snapshots_dir).load(snapshot_path)
    logger.info("Comparing %s (%d pages) against %s", snapshot_path, tree.count(), base_url)
    async with _fetcher_for(config, fetcher) as opened:
        differ = SnapshotDiffer.from_config(config, opened, sink=sink)
        return await differ.diff(tree, base_url)
