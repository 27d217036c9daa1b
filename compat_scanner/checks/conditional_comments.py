import re

from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext
from compat_scanner.checks.common import line_number

IF_IE_RE = re.compile(r"<!--\[if ie\]>", re.I)
OLD_IE_RE = re.compile(r"<!--\[if gte? ie [6-8]\]>", re.I)


def check_conditional_comments(website: WebsiteContext) -> CheckResult:
    """Conditional comments are ignored from IE10 on, so content behind them never shows."""
    data = {}
    match = IF_IE_RE.search(website.html) or OLD_IE_RE.search(website.html)
    if match:
        data["lineNumber"] = line_number(website.html, match.start())

    return CheckResult(test_name="conditionalComments", passed=match is None, data=data)
