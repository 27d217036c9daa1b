"""The fixed set of checks run by every scan.

Parallel checks only need the page HTML (or fetch what they need themselves)
and start before stylesheets and scripts are loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Union

from compat_scanner.checks import (
    MediaQueriesRule,
    TouchPropertiesRule,
    VendorPrefixRule,
    check_alt_images,
    check_aria_tags,
    check_browser_detection,
    check_compression,
    check_conditional_comments,
    check_css_prefixes,
    check_doctype,
    check_ie10_favicon,
    check_ie11_tiles,
    check_image_compression,
    check_input_types,
    check_js_libs,
    check_prefetch,
    check_responsive,
    check_same_markup,
    check_touch,
    check_w3c_validator,
    make_compat_list_check,
    make_plugin_free_check,
)
from compat_scanner.compatlist import CompatListService
from compat_scanner.csslint import CssRule
from compat_scanner.models import CheckResult

Handler = Callable[[Any], Union[CheckResult, Awaitable[CheckResult]]]


@dataclass(frozen=True)
class Check:
    name: str
    handler: Handler
    parallel: bool = False
    css_rules: tuple[CssRule, ...] = ()


def build_checks(compat_list: CompatListService) -> list[Check]:
    return [
        Check("doctype", check_doctype, parallel=True),
        Check("compression", check_compression, parallel=True),
        Check("conditionalComments", check_conditional_comments, parallel=True),
        Check("altImg", check_alt_images, parallel=True),
        Check("ariaTags", check_aria_tags, parallel=True),
        Check("prefetch", check_prefetch, parallel=True),
        Check("cvlist", make_compat_list_check(compat_list), parallel=True),
        Check("pluginfree", make_plugin_free_check(compat_list), parallel=True),
        Check("markup", check_same_markup, parallel=True),
        Check("w3c-validator", check_w3c_validator, parallel=True),
        Check("imageCompression", check_image_compression, parallel=True),
        Check("inputTypes", check_input_types, parallel=True),
        Check("ie10favicon", check_ie10_favicon, parallel=True),
        Check("ie11tiles", check_ie11_tiles, parallel=True),
        Check("responsive", check_responsive, css_rules=(MediaQueriesRule(),)),
        Check("touch", check_touch, css_rules=(TouchPropertiesRule(),)),
        Check("cssprefixes", check_css_prefixes, css_rules=(VendorPrefixRule(),)),
        Check("jslibs", check_js_libs),
        Check("browserDetection", check_browser_detection),
    ]


def collect_css_rules(checks: Iterable[Check]) -> list[CssRule]:
    rules: dict[str, CssRule] = {}
    for check in checks:
        for rule in check.css_rules:
            rules.setdefault(rule.id, rule)
    return list(rules.values())
