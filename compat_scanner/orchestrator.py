"""Fan a website context out to every registered check and collect one report.

Parallel checks start as soon as the page HTML is parsed; the rest wait until
CSS and JS resolution has finished.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Awaitable, Callable, Iterable, Optional

from compat_scanner.builder import resolve_resources
from compat_scanner.errors import CheckExecutionError
from compat_scanner.logger import get_logger
from compat_scanner.models import CheckResult, ScanReport
from compat_scanner.registry import Check
from compat_scanner.website import WebsiteContext

logger = get_logger(__name__)

Resolver = Callable[[WebsiteContext], Awaitable[WebsiteContext]]


async def run_check(check: Check, website: WebsiteContext) -> CheckResult:
    """Run one check; any failure becomes a failed result for that check only."""
    try:
        result = check.handler(website)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, dict):
            result = CheckResult.model_validate(result)
        if not isinstance(result, CheckResult):
            raise TypeError(f"expected a CheckResult, got {type(result).__name__}")
    except Exception as e:
        error = CheckExecutionError(check.name, e)
        logger.exception(str(error))
        return CheckResult(test_name=check.name, passed=False, data={"error": str(e)})
    return result


async def analyze(
    checks: Iterable[Check],
    website: WebsiteContext,
    resolve: Optional[Resolver] = resolve_resources,
) -> ScanReport:
    """Run all checks against ``website``.

    ``resolve`` fills in website.css and website.js; pass None when they are
    already loaded. Results are keyed by test name, so a duplicated name keeps
    whichever result settled last.
    """
    start = time.monotonic()
    checks = list(checks)

    tasks = [
        asyncio.ensure_future(run_check(check, website))
        for check in checks
        if check.parallel
    ]

    if resolve is not None:
        try:
            await resolve(website)
        except Exception:
            # sequential checks still run against whatever was loaded
            logger.exception("Resource resolution failed for %s", website.url)

    tasks.extend(
        asyncio.ensure_future(run_check(check, website))
        for check in checks
        if not check.parallel
    )

    results: dict[str, CheckResult] = {}
    for future in asyncio.as_completed(tasks):
        result = await future
        results[result.test_name] = result

    return ScanReport(
        url=website.url,
        process_time=round(time.monotonic() - start, 3),
        results=results,
    )
