"""Pinned-site metadata for IE10 and IE11 start screen tiles."""

from compat_scanner.errors import FetchError
from compat_scanner.logger import get_logger
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext, resolve_url

logger = get_logger(__name__)

BROWSER_CONFIG = "browserconfig.xml"
# data key, <meta name>, marker inside browserconfig.xml
TILES = [
    ("square70", "msapplication-square70x70logo", "square70x70"),
    ("square150", "msapplication-square150x150logo", "square150x150"),
    ("wide310", "msapplication-wide310x150logo", "wide310x150"),
    ("square310", "msapplication-square310x310logo", "square310x310"),
    ("notifications", "msapplication-notification", "<notification>"),
]


def _meta(website: WebsiteContext, name: str):
    for meta in website.soup.find_all("meta", attrs={"name": True}):
        if meta["name"].strip().lower() == name.lower():
            return meta
    return None


def _has_touch_icon(website: WebsiteContext) -> bool:
    for link in website.soup.find_all("link", rel=True):
        rel = link.get("rel")
        rel = " ".join(rel) if isinstance(rel, list) else rel
        if "apple-touch-icon" in rel.lower():
            return True
    return False


def check_ie10_favicon(website: WebsiteContext) -> CheckResult:
    return CheckResult(
        test_name="ie10favicon",
        passed=_meta(website, "msapplication-TileImage") is not None,
        data={"iOS": _has_touch_icon(website)},
    )


async def check_ie11_tiles(website: WebsiteContext) -> CheckResult:
    data = {key: _meta(website, name) is not None for key, name, _ in TILES}
    if any(data.values()):
        return CheckResult(test_name="ie11tiles", passed=True, data=data)

    # No tile metadata in the page: IE11 falls back to a browserconfig.xml
    config = _meta(website, "msapplication-config")
    href = (config.get("content") if config is not None else None) or BROWSER_CONFIG
    config_url = resolve_url(website.url, href)
    if not config_url:
        return CheckResult(test_name="ie11tiles", passed=False, data=data)

    try:
        result = await website.fetcher.fetch(config_url)
    except FetchError as e:
        logger.info("No browser config at %s: %s", config_url, e)
        return CheckResult(test_name="ie11tiles", passed=False, data=data)

    data = {key: marker in result.body for key, _, marker in TILES}
    return CheckResult(test_name="ie11tiles", passed=any(data.values()), data=data)
