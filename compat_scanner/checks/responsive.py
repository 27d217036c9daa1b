"""Responsive design coverage.

Breakpoints come from media queries, either on the <link> that loaded a sheet
or inside the sheet. Each breakpoint covers a band of +/- 25% around it; the
merged bands form the spectrum the site responds to.
"""

import re

from cssutils.css import CSSRule as CssutilsRule

from compat_scanner.csslint import CssMessage, CssRule
from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext

PERCENTAGE = 0.25
EM_SIZE = 16
MIN_WIDTH_RE = re.compile(r"min-width\s*:\s*([\d.]+)\s*(px|r?em)", re.I)
MAX_WIDTH_RE = re.compile(r"max-width\s*:\s*([\d.]+)\s*(px|r?em)", re.I)


class MediaQueriesRule(CssRule):
    id = "responsive"
    name = "Responsive Web Design"
    desc = "Collects the media queries of a stylesheet"

    def check(self, sheet) -> list[CssMessage]:
        medias = [
            rule.media.mediaText
            for rule in sheet.cssRules
            if rule.type == CssutilsRule.MEDIA_RULE
        ]
        if not medias:
            return []
        return [CssMessage(self.id, f"{len(medias)} media queries", data=medias)]


def _width(match) -> float:
    value = float(match.group(1))
    if match.group(2).lower() in ("em", "rem"):
        value *= EM_SIZE
    return value


def analyze_media_query(media: str, mins: list[float], maxs: list[float]) -> None:
    match = MIN_WIDTH_RE.search(media)
    if match:
        mins.append(_width(match))
    match = MAX_WIDTH_RE.search(media)
    if match:
        maxs.append(_width(match))


def create_spectrum(mins: list[float], maxs: list[float]) -> list[dict]:
    bands = [{"start": m, "end": m * (1 + PERCENTAGE)} for m in mins]
    bands += [{"start": m * (1 - PERCENTAGE), "end": m} for m in maxs]
    bands.sort(key=lambda band: band["start"])

    spectrum: list[dict] = []
    for band in bands:
        if spectrum and band["start"] <= spectrum[-1]["end"]:
            spectrum[-1]["end"] = max(band["end"], spectrum[-1]["end"])
        else:
            spectrum.append(dict(band))
    return spectrum


def check_responsive(website: WebsiteContext) -> CheckResult:
    mins: list[float] = []
    maxs: list[float] = []

    for css in website.css:
        # <link media="only screen and (min-width: 480px)" href="480.css">
        if css.media and ("min-width" in css.media or "max-width" in css.media):
            analyze_media_query(css.media, mins, maxs)
            continue
        for message in css.report.by_rule(MediaQueriesRule.id):
            for media in message.data:
                analyze_media_query(media, mins, maxs)

    mins = sorted(set(mins))
    maxs = sorted(set(maxs))
    passed = bool(mins or maxs)

    return CheckResult(
        test_name="responsive",
        passed=passed,
        data={
            "minBreakPoints": mins,
            "maxBreakPoints": maxs,
            "spectrum": create_spectrum(mins, maxs) if passed else [],
        },
    )
