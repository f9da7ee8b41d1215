# site_drift/crawler/frontier.py
"""
Traversal containers of the crawl: the FIFO frontier and the visited-URL set.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Set

from site_drift.crawler.models import SiteNode


class FrontierQueue:
    """Strict FIFO of nodes waiting to be fetched; keeps the crawl breadth-first."""

    def __init__(self, nodes: Iterable[SiteNode] = ()) -> None:
        self._items: Deque[SiteNode] = deque(nodes)

    def push(self, node: SiteNode) -> None:
        self._items.append(node)

    def pop(self) -> SiteNode:
        """Remove and return the oldest node. Raises IndexError when empty."""
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


class VisitedSet:
    """URLs already enqueued during one crawl. A URL is added at most once."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._urls: Set[str] = set(urls)

    def add(self, url: str) -> bool:
        """Insert *url*; return False if it was already present."""
        if url in self._urls:
            return False
        self._urls.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)
