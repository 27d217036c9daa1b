"""Load the external stylesheets and embedded <style> blocks of a page,
following @import recursively. Sheets added dynamically by script are not seen."""

from __future__ import annotations

import asyncio
from typing import Optional

from compat_scanner.csslint import ImportsRule, verify
from compat_scanner.errors import FetchError, ParseError
from compat_scanner.logger import get_logger
from compat_scanner.website import EMBED, CssResource, WebsiteContext, resolve_url

logger = get_logger(__name__)

IMPORTS_RULE = ImportsRule()


def _rules(website: WebsiteContext) -> list:
    rules = [r for r in website.css_rules if r.id != IMPORTS_RULE.id]
    return [IMPORTS_RULE] + rules


def _flatten(groups) -> list[CssResource]:
    return [resource for group in groups for resource in group]


def _is_stylesheet(tag) -> bool:
    if tag.name != "link" or not tag.get("href"):
        return False
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return "stylesheet" in (value.lower() for value in rel)


def _schedule(css_url: str, media: Optional[str], website: WebsiteContext):
    # Mark before the coroutine exists so a second reference can never race it
    website.css_parsed_urls.add(css_url)
    return parse_css_from_url(css_url, media, website)


async def parse_css(
    text: str,
    css_url: str,
    media: Optional[str],
    inline: bool,
    website: WebsiteContext,
) -> list[CssResource]:
    """Analyze one sheet and everything it imports, in discovery order."""
    try:
        report = verify(text, _rules(website))
    except ParseError as e:
        logger.warning("Skipping stylesheet %s: %s", EMBED if inline else css_url, e)
        return []

    resources = [CssResource(url=EMBED if inline else css_url, media=media, content=text, report=report)]

    imports = []
    for message in report.by_rule(IMPORTS_RULE.id):
        for css_import in message.data:
            # @import resolves against the importing sheet, not the page
            import_url = resolve_url(css_url, css_import["url"])
            if import_url and import_url not in website.css_parsed_urls:
                imports.append(_schedule(import_url, css_import["media"], website))

    if imports:
        resources.extend(_flatten(await asyncio.gather(*imports)))
    return resources


async def parse_css_from_url(css_url: str, media: Optional[str], website: WebsiteContext) -> list[CssResource]:
    try:
        result = await website.fetcher.fetch(css_url)
    except FetchError as e:
        logger.warning("Request for %s returned %s", css_url, e)
        return []

    resources = await parse_css(result.body, result.url, media, False, website)
    if resources and resources[0].url != css_url:
        # Keep the URL the page asked for; imports above already used the final one
        resources[0].url = css_url
    return resources


async def load_css(website: WebsiteContext) -> WebsiteContext:
    pending = []

    for link in website.soup.find_all(_is_stylesheet):
        css_url = resolve_url(website.url, link["href"])
        if css_url and css_url not in website.css_parsed_urls:
            pending.append(_schedule(css_url, link.get("media"), website))

    for style in website.soup.find_all("style"):
        text = style.get_text()
        if text.strip():
            pending.append(parse_css(text, website.url, style.get("media"), True, website))

    website.css = _flatten(await asyncio.gather(*pending)) if pending else []
    return website
