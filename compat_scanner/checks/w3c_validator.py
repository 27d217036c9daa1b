from __future__ import annotations

import asyncio

import requests

from compat_scanner.config import W3C_VALIDATOR_TIMEOUT, W3C_VALIDATOR_URL
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext


def _call_validator(page_url: str) -> dict | None:
    """Call the W3C Nu validator and return parsed JSON, or None on failure."""
    try:
        resp = requests.get(
            W3C_VALIDATOR_URL,
            params={"doc": page_url, "out": "json"},
            headers={"User-Agent": "Compat Scanner - Code Scanner"},
            timeout=W3C_VALIDATOR_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError):
        return None


async def check_w3c_validator(website: WebsiteContext) -> CheckResult:
    try:
        content = await asyncio.wait_for(
            asyncio.to_thread(_call_validator, website.url), timeout=W3C_VALIDATOR_TIMEOUT
        )
    except asyncio.TimeoutError:
        return CheckResult(test_name="w3c-validator", passed=False, data=["Timeout"])

    if content is None:
        return CheckResult(test_name="w3c-validator", passed=False, data=["Error"])

    messages = content.get("messages")
    if not isinstance(messages, list):
        return CheckResult(test_name="w3c-validator", passed=False, data=["Remote error"])

    return CheckResult(test_name="w3c-validator", passed=not messages, data=messages)
