from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext


def check_compression(website: WebsiteContext) -> CheckResult:
    return CheckResult(
        test_name="compression",
        passed=website.compression != "none",
        data={"compression": website.compression},
    )
