from __future__ import annotations

import asyncio

import requests

from compat_scanner.config import (
    IMAGE_COMPRESSION_MIN_SAVINGS,
    IMAGE_COMPRESSION_TIMEOUT,
    KRAKEN_ENDPOINT,
    KRAKEN_KEY,
    KRAKEN_SECRET,
)
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext


def _call_kraken(page_url: str) -> dict | None:
    try:
        resp = requests.post(
            KRAKEN_ENDPOINT,
            data={"key": KRAKEN_KEY, "secret": KRAKEN_SECRET, "url": page_url},
            timeout=IMAGE_COMPRESSION_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError):
        return None


async def check_image_compression(website: WebsiteContext) -> CheckResult:
    result = CheckResult(test_name="imageCompression", passed=True)
    if not KRAKEN_KEY:
        return result

    try:
        content = await asyncio.wait_for(
            asyncio.to_thread(_call_kraken, website.url), timeout=IMAGE_COMPRESSION_TIMEOUT
        )
    except asyncio.TimeoutError:
        return result

    if content and content.get("success"):
        meta = content.get("meta") or {}
        if meta.get("total_savings", 0) > IMAGE_COMPRESSION_MIN_SAVINGS:
            result.passed = False
            result.data = meta
    return result
