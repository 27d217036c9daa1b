from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

ARIA_ATTRIBUTES = {
    "role",
    "aria-activedescendant", "aria-atomic", "aria-autocomplete", "aria-busy",
    "aria-checked", "aria-controls", "aria-describedby", "aria-disabled",
    "aria-dropeffect", "aria-expanded", "aria-flowto", "aria-grabbed",
    "aria-haspopup", "aria-hidden", "aria-invalid", "aria-label",
    "aria-labelledby", "aria-level", "aria-live", "aria-multiline",
    "aria-multiselectable", "aria-orientation", "aria-owns", "aria-posinset",
    "aria-pressed", "aria-readonly", "aria-relevant", "aria-required",
    "aria-selected", "aria-setsize", "aria-sort", "aria-valuemax",
    "aria-valuemin", "aria-valuenow", "aria-valuetext",
}


def check_alt_images(website: WebsiteContext) -> CheckResult:
    missing: list[str] = []
    for img in website.soup.find_all("img"):
        alt = img.get("alt")
        if alt is None or alt.strip() == "":
            src = img.get("src", "")
            if src not in missing:
                missing.append(src)

    return CheckResult(test_name="altImg", passed=not missing, data=missing)


def check_aria_tags(website: WebsiteContext) -> CheckResult:
    found = website.soup.find(lambda tag: any(attr in ARIA_ATTRIBUTES for attr in tag.attrs))
    return CheckResult(test_name="ariaTags", passed=found is not None, data=[])
