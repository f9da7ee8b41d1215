"""
site_drift.crawler: breadth-first crawl of a documentation site and its collaborators.
"""
from site_drift.crawler.crawler import SiteCrawler, crawl_site
from site_drift.crawler.fetcher import HttpFetcher, PageFetcher, open_fetcher
from site_drift.crawler.models import CrawlStats, Link, SiteNode

__all__ = [
    "SiteCrawler",
    "crawl_site",
    "HttpFetcher",
    "PageFetcher",
    "open_fetcher",
    "CrawlStats",
    "Link",
    "SiteNode",
]
