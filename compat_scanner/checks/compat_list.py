from compat_scanner.compatlist import CompatListService
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext


def _compat_tag_mode(website: WebsiteContext):
    for meta in website.soup.find_all("meta", attrs={"http-equiv": True}):
        if meta["http-equiv"].strip().lower() == "x-ua-compatible" and meta.get("content"):
            return meta["content"].strip().lower()
    return None


def make_compat_list_check(compat_list: CompatListService):
    async def check_compat_list(website: WebsiteContext) -> CheckResult:
        mode = _compat_tag_mode(website)
        if mode is not None and "edge" not in mode:
            return CheckResult(test_name="cvlist", passed=False, data={"source": "tag", "mode": mode})

        entry = await compat_list.lookup(website.hostname)
        if entry is not None and entry.requires_legacy_mode:
            return CheckResult(test_name="cvlist", passed=False, data={"source": "cvlist", "mode": entry.doc_mode})

        return CheckResult(test_name="cvlist", passed=True, data={})

    return check_compat_list
