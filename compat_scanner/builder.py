from __future__ import annotations

import asyncio
import json
from typing import Optional

from compat_scanner.errors import MalformedPackageError
from compat_scanner.fetcher import Fetcher
from compat_scanner.loadcss import load_css, parse_css
from compat_scanner.loadjs import load_js
from compat_scanner.logger import get_logger
from compat_scanner.models import PackageRequest
from compat_scanner.website import EMBED, JsResource, WebsiteContext, resolve_url

logger = get_logger(__name__)

PRIVATE_URL = "http://private.site/"


async def load_website(
    url: str,
    auth: Optional[tuple[str, str]] = None,
    css_rules=(),
    fetcher: Optional[Fetcher] = None,
) -> WebsiteContext:
    """Fetch the page and parse its DOM. CSS and JS are still empty.

    Fetch errors on the page itself propagate: without it there is nothing to scan.
    """
    owned = fetcher is None
    fetcher = fetcher or Fetcher(auth=auth)
    try:
        page = await fetcher.fetch(url)
    except Exception:
        if owned:
            fetcher.close()
        raise
    logger.info("Fetched %s (HTTP %s, compression: %s)", page.url, page.status_code, page.compression)
    return WebsiteContext.from_page(page, fetcher, css_rules)


async def resolve_resources(website: WebsiteContext) -> WebsiteContext:
    # No data flows between the two resolvers; both settle before this returns
    outcomes = await asyncio.gather(load_css(website), load_js(website), return_exceptions=True)
    for name, outcome in zip(("CSS", "JS"), outcomes):
        if isinstance(outcome, Exception):
            logger.error("%s resolution failed for %s: %r", name, website.url, outcome)
    logger.info(
        "Resolved %d stylesheet(s) and %d script(s) for %s",
        len(website.css), len(website.js), website.url,
    )
    return website


async def build_website(
    url: str,
    auth: Optional[tuple[str, str]] = None,
    css_rules=(),
    fetcher: Optional[Fetcher] = None,
) -> WebsiteContext:
    website = await load_website(url, auth=auth, css_rules=css_rules, fetcher=fetcher)
    return await resolve_resources(website)


def _load_json_list(value, name: str) -> list:
    if isinstance(value, list):
        return value
    try:
        entries = json.loads(value)
    except (TypeError, ValueError) as e:
        raise MalformedPackageError(f"'{name}' is not valid JSON") from e
    if not isinstance(entries, list):
        raise MalformedPackageError(f"'{name}' must be a JSON array")
    return entries


def _package_js(entry) -> JsResource:
    if isinstance(entry, str):
        return JsResource(src=None, url=EMBED, content=entry)
    if isinstance(entry, dict):
        src = entry.get("url") or entry.get("src")
        return JsResource(src=src, url=src or EMBED, content=entry.get("content") or "")
    raise MalformedPackageError("Unexpected entry in 'js'")


async def build_from_package(
    package: PackageRequest,
    css_rules=(),
    fetcher: Optional[Fetcher] = None,
) -> WebsiteContext:
    """Build a context from content a browser extension already captured."""
    css_entries = _load_json_list(package.css, "css")
    js_entries = _load_json_list(package.js, "js")
    url = package.url.replace('"', "").strip() or PRIVATE_URL

    website = WebsiteContext.from_html(
        url,
        package.html,
        fetcher=fetcher or Fetcher(),
        css_rules=list(css_rules),
    )
    website.js = [_package_js(entry) for entry in js_entries]

    pending = []
    for entry in css_entries:
        if not isinstance(entry, dict):
            raise MalformedPackageError("Unexpected entry in 'css'")
        if entry.get("content"):
            css_url = resolve_url(url, entry["url"]) if entry.get("url") else None
            if css_url:
                website.css_parsed_urls.add(css_url)
            pending.append(parse_css(entry["content"], css_url or url, None, not css_url, website))

    groups = await asyncio.gather(*pending) if pending else []
    website.css = [resource for group in groups for resource in group]
    return website
