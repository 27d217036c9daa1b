from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from compat_scanner.csslint import CssReport, CssRule
from compat_scanner.fetcher import Fetcher, FetchResult
from compat_scanner.logger import get_logger

logger = get_logger(__name__)

EMBED = "embed"


def resolve_url(base: str, href: str) -> Optional[str]:
    """Absolute URL of ``href`` against ``base``, or None when ``href`` is malformed."""
    try:
        return urljoin(base, href.strip())
    except ValueError as e:
        logger.warning("Skipping malformed URL %r on %s: %s", href, base, e)
        return None


@dataclass
class CssResource:
    url: str
    media: Optional[str]
    content: str
    report: CssReport


@dataclass
class JsResource:
    src: Optional[str]
    url: str
    content: str


@dataclass
class WebsiteContext:
    """Everything the checks of one scan look at.

    Built per request and filled in stages: html and soup first, then css and
    js once the resolvers finish. Checks only read it.
    """

    url: str
    html: str
    soup: BeautifulSoup
    compression: str = "none"
    auth: Optional[tuple[str, str]] = None
    fetcher: Optional[Fetcher] = None
    css_rules: list[CssRule] = field(default_factory=list)
    css: list[CssResource] = field(default_factory=list)
    js: list[JsResource] = field(default_factory=list)
    css_parsed_urls: set[str] = field(default_factory=set)

    @property
    def parsed_url(self):
        return urlparse(self.url)

    @property
    def hostname(self) -> str:
        return self.parsed_url.hostname or ""

    @classmethod
    def from_html(cls, url: str, html: str, **kwargs) -> "WebsiteContext":
        # lxml lower-cases tag and attribute names
        return cls(url=url, html=html, soup=BeautifulSoup(html, "lxml"), **kwargs)

    @classmethod
    def from_page(cls, page: FetchResult, fetcher: Fetcher, css_rules=()) -> "WebsiteContext":
        return cls.from_html(
            page.url,
            page.body,
            compression=page.compression,
            auth=fetcher.auth,
            fetcher=fetcher,
            css_rules=list(css_rules),
        )
