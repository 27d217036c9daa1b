"""Compare the markup served to IE with the markup served to a Chromium UA.

A site that varies its markup on every request regardless of the user agent
cannot be judged reliably; its result is flagged transient.
"""

from bs4 import BeautifulSoup

from compat_scanner.config import MARKUP_USER_AGENT
from compat_scanner.errors import FetchError
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

DEFAULT_THRESHOLD = 0.8
MARKUP_ELEMENTS = [
    ("div", 0.9), ("canvas", None), ("a", None), ("p", 0.7),
    ("h1", None), ("h2", None), ("h3", None), ("h4", None),
    ("ol", None), ("ul", None), ("li", None),
    ("table", None), ("tr", None), ("th", None), ("td", None),
    ("img", 0.9), ("span", 0.5), ("form", None), ("input", None),
    ("textarea", None), ("button", None), ("video", None), ("audio", None),
    ("object", None), ("embed", None),
]


def _is_visible(tag) -> bool:
    style = tag.get("style", "").replace(" ", "").lower()
    return "display:none" not in style and "visibility:hidden" not in style


def count_elements(soup: BeautifulSoup, name: str) -> int:
    return sum(1 for tag in soup.find_all(name) if _is_visible(tag))


def compare_markup(soup1: BeautifulSoup, soup2: BeautifulSoup) -> tuple[bool, list[dict]]:
    passed = True
    results = []
    for name, threshold in MARKUP_ELEMENTS:
        threshold = threshold or DEFAULT_THRESHOLD
        edge_count = count_elements(soup1, name)
        chrome_count = count_elements(soup2, name)
        max_count = max(edge_count, chrome_count)
        element_passed = max_count == 0 or min(edge_count, chrome_count) / max_count >= threshold
        results.append({
            "element": name,
            "threshold": threshold,
            "edgeCount": edge_count,
            "chromeCount": chrome_count,
            "passed": element_passed,
        })
        passed = passed and element_passed
    return passed, results


async def _chrome_soup(website: WebsiteContext) -> BeautifulSoup:
    page = await website.fetcher.fetch(website.url, headers={"User-Agent": MARKUP_USER_AGENT})
    return BeautifulSoup(page.body, "lxml")


async def check_same_markup(website: WebsiteContext) -> CheckResult:
    try:
        chrome = await _chrome_soup(website)
    except FetchError as e:
        return CheckResult(test_name="markup", passed=False, data=str(e))

    passed, results = compare_markup(website.soup, chrome)
    if passed:
        return CheckResult(test_name="markup", passed=True, data=results)

    # Ask again with the same UA: if Chromium disagrees with itself the difference isn't about IE
    try:
        chrome_again = await _chrome_soup(website)
    except FetchError as e:
        return CheckResult(test_name="markup", passed=False, data=str(e))

    stable, _ = compare_markup(chrome, chrome_again)
    if stable:
        return CheckResult(test_name="markup", passed=False, data=results)

    return CheckResult(
        test_name="markup",
        passed=True,
        transient=True,
        data=(
            "Site candidate for exclude list. The HTML markup for this site presents "
            "differences on each request regardless of the user agent."
        ),
    )
