# site_drift/crawler/link_extractor.py
"""
Title and link extraction from rendered HTML.

Selectors are configuration: documentation sites differ in where the page
heading lives, so callers pass ``title_selector`` from :class:`CrawlConfig`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_drift.crawler.models import Link

DEFAULT_TITLE_SELECTOR = "header h1"


@dataclass(slots=True)
class ParsedPage:
    """Result of parsing one page for the crawl."""

    url: str
    base_url: str
    title: str
    links: List[Link] = field(default_factory=list)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _title(soup: BeautifulSoup, selector: str) -> str:
    tag = soup.select_one(selector)
    return tag.get_text().strip() if tag is not None else ""


def _links(soup: BeautifulSoup) -> List[Link]:
    links: List[Link] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        href = href_val.strip()
        text = tag.get_text().strip()
        if href and text:
            links.append(Link(href=href, text=text))
    return links


def _base(soup: BeautifulSoup, page_url: str) -> str:
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        href = base_tag.get("href")
        if isinstance(href, str) and href.strip():
            return urljoin(page_url, href.strip())
    return page_url


def extract_title(html: str, selector: str = DEFAULT_TITLE_SELECTOR) -> str:
    """Text of the first element matching *selector*, stripped; ``""`` if absent."""
    return _title(_soup(html), selector)


def extract_links(html: str) -> List[Link]:
    """Every ``<a>`` with a non-empty href and non-empty visible text, in document order."""
    return _links(_soup(html))


def document_base(html: str, page_url: str) -> str:
    """URL relative links resolve against: ``<base href>`` if present, else *page_url*."""
    return _base(_soup(html), page_url)


def parse_page(html: str, page_url: str, title_selector: str = DEFAULT_TITLE_SELECTOR) -> ParsedPage:
    """Parse once and return title, links and link base of a crawled page."""
    soup = _soup(html)
    return ParsedPage(
        url=page_url,
        base_url=_base(soup, page_url),
        title=_title(soup, title_selector),
        links=_links(soup),
    )


def is_not_found(html: str, selector: str, marker: str) -> bool:
    """True when the first *selector* element contains *marker* (rendered 404 page)."""
    tag: Optional[Tag] = _soup(html).select_one(selector)
    return tag is not None and marker in tag.get_text()


__all__ = [
    "ParsedPage",
    "extract_title",
    "extract_links",
    "document_base",
    "parse_page",
    "is_not_found",
]
