from compat_scanner.models import CheckResult
from compat_scanner.website import EMBED, WebsiteContext
from compat_scanner.checks.common import line_number

PATTERNS = [
    "navigator.userAgent",
    "navigator.appVersion",
    "navigator.appName",
    "navigator.product",
    "navigator.vendor",
    "$.browser",
    "Browser.",
]
# Well known libraries sniff for good reasons; only first-party code is judged
EXCEPTIONS = [
    "ajax.googleapis.com",
    "ajax.aspnetcdn.com",
    "ajax.microsoft.com",
    "jquery",
    "mootools",
    "prototype",
    "protoaculous",
]


def _scan_script(content: str):
    for pattern in PATTERNS:
        index = content.find(pattern)
        if index != -1:
            return pattern, line_number(content, index)
    return None, -1


def check_browser_detection(website: WebsiteContext) -> CheckResult:
    passed = True
    data = []
    for js in website.js:
        if js.url != EMBED and any(token in js.url.lower() for token in EXCEPTIONS):
            continue

        pattern, line = _scan_script(js.content)
        if pattern is None:
            data.append({"passed": True, "url": js.url})
        else:
            passed = False
            data.append({"passed": False, "pattern": pattern, "lineNumber": line, "url": js.url})

    return CheckResult(test_name="browserDetection", passed=passed, data=data)
