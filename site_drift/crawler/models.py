# site_drift/crawler/models.py
"""
Data models for the SiteDrift crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

from pydantic import BaseModel, ConfigDict, Field


class SiteNode(BaseModel):
    """One page of the site tree; the persisted snapshot has exactly this shape."""

    model_config = ConfigDict(extra="ignore")

    url: str
    title: str = ""
    children: List[SiteNode] = Field(default_factory=list)
    depth: int = Field(0, ge=0)

    def add_child(self, url: str) -> SiteNode:
        """Append an unvisited child one level below this node and return it."""
        child = SiteNode(url=url, depth=self.depth + 1)
        self.children.append(child)
        return child

    def walk(self) -> Iterator[SiteNode]:
        """Pre-order iteration over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count(self) -> int:
        return sum(1 for _ in self.walk())


@dataclass(slots=True, frozen=True)
class Link:
    """Anchor found on a page: raw href and visible text."""

    href: str
    text: str


@dataclass(slots=True)
class CrawlStats:
    """Counters collected during one crawl."""

    pages_fetched: int = 0
    pages_failed: int = 0
    pages_skipped: int = 0
    links_malformed: int = 0
    duration: float = 0.0
