import re

from compat_scanner.csslint import CssMessage, CssRule, style_rules
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

PREFIX_RE = re.compile(r"^-(?:webkit|moz|ms|o)-(.+)$")
# Families that shipped unprefixed; the prefixed form alone leaves other browsers out
PREFIXED_FAMILIES = {
    "animation",
    "backface-visibility",
    "box-sizing",
    "column",
    "columns",
    "perspective",
    "transform",
    "transition",
    "user-select",
}
PREFIXED_GRADIENT_RE = re.compile(r"-(?:webkit|moz|ms|o)-((?:repeating-)?(?:linear|radial)-gradient)\(")
STANDARD_GRADIENT_RE = re.compile(r"(?<![-\w])(?:repeating-)?(?:linear|radial)-gradient\(")


def _family(name: str) -> str:
    for family in PREFIXED_FAMILIES:
        if name == family or name.startswith(family + "-"):
            return family
    return ""


class VendorPrefixRule(CssRule):
    id = "compatible-vendor-prefixes"
    name = "Require standard property with vendor prefix"
    desc = "Prefixed properties and gradients need their standard form in the same rule"

    def check(self, sheet) -> list[CssMessage]:
        messages = []
        for rule in style_rules(sheet.cssRules):
            props = rule.style.getProperties(all=True)
            names = {prop.name for prop in props}

            for prop in props:
                match = PREFIX_RE.match(prop.name)
                if match and _family(match.group(1)) and match.group(1) not in names:
                    messages.append(CssMessage(
                        self.id,
                        f"{prop.name} is missing the standard {match.group(1)}",
                        selector=rule.selectorText,
                        data={"property": prop.name, "standard": match.group(1)},
                    ))

                gradient = PREFIXED_GRADIENT_RE.search(prop.value)
                if gradient:
                    same_property = [p.value for p in props if p.name == prop.name]
                    if not any(STANDARD_GRADIENT_RE.search(value) for value in same_property):
                        messages.append(CssMessage(
                            self.id,
                            f"{prop.name} uses a prefixed {gradient.group(1)} only",
                            selector=rule.selectorText,
                            data={"property": prop.name, "standard": gradient.group(1)},
                        ))
        return messages


def check_css_prefixes(website: WebsiteContext) -> CheckResult:
    data = []
    for css in website.css:
        for message in css.report.by_rule(VendorPrefixRule.id):
            data.append({
                "cssUrl": css.url,
                "selector": message.selector,
                "property": message.data["property"],
                "standard": message.data["standard"],
            })

    return CheckResult(test_name="cssprefixes", passed=not data, data=data)
