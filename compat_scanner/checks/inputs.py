from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

HTML5_TYPES = {
    "color", "date", "datetime", "datetime-local", "email", "month", "number",
    "range", "reset", "search", "tel", "time", "url", "week",
}


def check_input_types(website: WebsiteContext) -> CheckResult:
    types = [
        (tag.get("type") or "").strip().lower()
        for tag in website.soup.find_all("input")
    ]
    types = [kind for kind in types if kind != "hidden"]

    # A single field (usually search) is not a form worth judging
    passed = len(types) <= 1 or any(kind in HTML5_TYPES for kind in types)
    return CheckResult(test_name="inputTypes", passed=passed)
