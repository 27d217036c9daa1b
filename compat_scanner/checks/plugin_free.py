from compat_scanner.compatlist import CompatListService
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext
from compat_scanner.checks.common import line_number


def _is_flash_or_svg(tag) -> bool:
    if tag.name == "object":
        data = tag.get("data", "").lower()
        if "swf" in data or "svg" in data:
            return True
        return any("swf" in param.get("value", "").lower() for param in tag.find_all("param"))
    src = tag.get("src", "").lower()
    return "swf" in src or "svg" in src


def _tag_line(html: str, tag, position: int) -> int:
    # position is the index of the tag among all tags with the same name
    lowered = html.lower()
    index = -1
    for _ in range(position + 1):
        index = lowered.find("<" + tag.name, index + 1)
        if index == -1:
            break
    return line_number(html, index)


def make_plugin_free_check(compat_list: CompatListService):
    async def check_plugin_free(website: WebsiteContext) -> CheckResult:
        entry = await compat_list.lookup(website.hostname)
        if entry is not None and (entry.no_flash or entry.requires_activex):
            return CheckResult(
                test_name="pluginfree",
                passed=False,
                data={"activex": not entry.no_flash, "cvlist": True},
            )

        for name in ("object", "embed"):
            for position, tag in enumerate(website.soup.find_all(name)):
                if not _is_flash_or_svg(tag):
                    return CheckResult(
                        test_name="pluginfree",
                        passed=False,
                        data={
                            "activex": True,
                            "cvlist": False,
                            "lineNumber": _tag_line(website.html, tag, position),
                        },
                    )

        return CheckResult(test_name="pluginfree", passed=True, data=[])

    return check_plugin_free
