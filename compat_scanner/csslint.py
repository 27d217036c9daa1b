"""CSS analysis on top of cssutils.

A report is produced by running an explicit list of rule objects over one
parsed stylesheet; nothing is registered globally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

import cssutils
from cssutils.css import CSSRule

from compat_scanner.errors import ParseError

# cssutils reports every unknown property or value it meets (var(), calc(), ...)
cssutils.log.setLevel(logging.CRITICAL)


@dataclass
class CssMessage:
    rule_id: str
    message: str
    line: int = 0
    col: int = 0
    selector: str = ""
    data: Any = None


@dataclass
class CssReport:
    messages: list[CssMessage] = field(default_factory=list)

    def by_rule(self, rule_id: str) -> list[CssMessage]:
        return [m for m in self.messages if m.rule_id == rule_id]


class CssRule:
    id = ""
    name = ""
    desc = ""

    def check(self, sheet) -> list[CssMessage]:
        raise NotImplementedError


def style_rules(rules) -> Iterator:
    """Yield every style rule, descending into @media blocks."""
    for rule in rules:
        if rule.type == CSSRule.STYLE_RULE:
            yield rule
        elif rule.type == CSSRule.MEDIA_RULE:
            yield from style_rules(rule.cssRules)


class ImportsRule(CssRule):
    id = "auto-imports"
    name = "auto imports"
    desc = "Collects @import targets so they can be downloaded"

    def check(self, sheet) -> list[CssMessage]:
        imports = [
            {"url": rule.href, "media": rule.media.mediaText or None}
            for rule in sheet.cssRules
            if rule.type == CSSRule.IMPORT_RULE and rule.href
        ]
        if not imports:
            return []
        return [CssMessage(self.id, f"{len(imports)} @import(s) found", data=imports)]


def _no_fetch(url):
    # @imports are downloaded by the resolver with the scan's own session
    return None


def verify(text: str, rules: Iterable[CssRule] = ()) -> CssReport:
    parser = cssutils.CSSParser(raiseExceptions=False, validate=False, fetcher=_no_fetch)
    try:
        sheet = parser.parseString(text)
    except Exception as e:
        raise ParseError(f"Could not parse stylesheet: {e}") from e

    report = CssReport()
    for rule in rules:
        try:
            report.messages.extend(rule.check(sheet))
        except Exception as e:
            raise ParseError(f"Rule {rule.id} failed: {e}") from e
    return report
