# site_drift/__init__.py
"""
SiteDrift package initializer.
Snapshots the link tree of a documentation site and detects drift against it.
"""
__version__ = "0.1.0"

from site_drift.crawler.crawler import SiteCrawler, crawl_site
from site_drift.crawler.models import SiteNode
from site_drift.diff import DiffResult, SnapshotDiffer, compare_snapshot
from site_drift.snapshot import SnapshotStore

__all__ = [
    "__version__",
    "SiteCrawler",
    "crawl_site",
    "SiteNode",
    "DiffResult",
    "SnapshotDiffer",
    "compare_snapshot",
    "SnapshotStore",
]
