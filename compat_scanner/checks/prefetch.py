from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

HINTS = {"prefetch": "prefetch", "dns-prefetch": "dnsprefetch", "prerender": "prerender"}


def check_prefetch(website: WebsiteContext) -> CheckResult:
    data = {key: False for key in HINTS.values()}
    for link in website.soup.find_all("link", rel=True):
        rel = link.get("rel")
        values = rel.split() if isinstance(rel, str) else rel
        for value in values:
            key = HINTS.get(value.lower())
            if key:
                data[key] = True

    return CheckResult(test_name="prefetch", passed=any(data.values()), data=data)
