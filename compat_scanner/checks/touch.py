import re

from compat_scanner.csslint import CssMessage, CssRule, style_rules
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

TOUCH_PROPERTIES = {
    "touch-action",
    "-ms-touch-action",
    "-ms-scroll-snap-points-x",
    "-ms-scroll-snap-points-y",
    "-ms-scroll-snap-type",
    "-ms-scroll-snap-x",
    "-ms-scroll-snap-y",
    "-ms-scroll-chaining",
    "-ms-content-zooming",
    "-ms-content-zoom-limit",
    "-ms-content-zoom-limit-max",
    "-ms-content-zoom-limit-min",
    "-ms-content-zoom-chaining",
    "-ms-content-zoom-snap-points",
    "-ms-content-zoom-snap-type",
    "-ms-content-zoom-snap",
}
JS_PATTERNS = [
    re.compile(r"MSGesture"),
    re.compile(r"MSPointer"),
    re.compile(r"msContentZoomFactor"),
    re.compile(r"navigator\.msPointerEnabled"),
    re.compile(r"navigator\.msMaxTouchPoints"),
    re.compile(r"navigator\.maxTouchPoints"),
    re.compile(r"""["']pointer(?:down|up|move|cancel)["']"""),
    re.compile(r"\bPointerEvent\b"),
]


class TouchPropertiesRule(CssRule):
    id = "touch-properties"
    name = "Touch properties"
    desc = "Reports declarations of touch and pointer related properties"

    def check(self, sheet) -> list[CssMessage]:
        messages = []
        for rule in style_rules(sheet.cssRules):
            for prop in rule.style.getProperties(all=True):
                if prop.name in TOUCH_PROPERTIES:
                    messages.append(CssMessage(self.id, prop.name, selector=rule.selectorText, data=prop.name))
        return messages


def check_touch(website: WebsiteContext) -> CheckResult:
    passed = any(css.report.by_rule(TouchPropertiesRule.id) for css in website.css)
    if not passed:
        passed = any(pattern.search(js.content) for js in website.js for pattern in JS_PATTERNS)

    return CheckResult(test_name="touch", passed=passed)
