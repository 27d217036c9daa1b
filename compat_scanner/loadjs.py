"""Load external scripts and embedded script blocks. Scripts injected at runtime are not seen."""

from __future__ import annotations

import asyncio
from typing import Optional

from compat_scanner.errors import FetchError
from compat_scanner.logger import get_logger
from compat_scanner.website import EMBED, JsResource, WebsiteContext, resolve_url

logger = get_logger(__name__)


async def _download_js(js_url: str, src: str, website: WebsiteContext) -> Optional[JsResource]:
    try:
        result = await website.fetcher.fetch(js_url)
    except FetchError as e:
        # A missing third-party script must not abort the scan
        logger.warning("Request for %s returned %s", js_url, e)
        return None
    return JsResource(src=src, url=result.url, content=result.body)


async def _embedded_js(text: str) -> JsResource:
    return JsResource(src=None, url=EMBED, content=text)


async def load_js(website: WebsiteContext) -> WebsiteContext:
    pending = []

    for script in website.soup.find_all("script"):
        src = (script.get("src") or "").strip()
        if src:
            js_url = resolve_url(website.url, src)
            if js_url:
                pending.append(_download_js(js_url, src, website))
        else:
            text = script.get_text()
            if text.strip():
                pending.append(_embedded_js(text))

    results = await asyncio.gather(*pending) if pending else []
    website.js = [resource for resource in results if resource is not None]
    return website
