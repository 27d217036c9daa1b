import pytest

from compat_scanner.csslint import CssRule, style_rules
from compat_scanner.errors import ParseError
from compat_scanner.fetcher import FetchResult
from compat_scanner.loadcss import load_css
from compat_scanner.website import EMBED


def _page(*links, style=None):
    head = "".join(f'<link rel="stylesheet" href="{href}">' for href in links)
    if style is not None:
        head += f"<style>{style}</style>"
    return f"<!doctype html><html><head>{head}</head><body></body></html>"


@pytest.mark.asyncio
async def test_page_without_css(make_website):
    website = make_website("<html><head></head><body><p>Hi</p></body></html>")

    await load_css(website)

    assert website.css == []
    assert website.fetcher.requests == []


@pytest.mark.asyncio
async def test_linked_sheet_and_its_import(make_website):
    website = make_website(_page("b.css"), pages={
        "http://test/b.css": '@import "c.css";\nbody { color: red }',
        "http://test/c.css": "p { margin: 0 }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/b.css", "http://test/c.css"]
    assert all(css.report is not None for css in website.css)
    assert website.css[1].content == "p { margin: 0 }"


@pytest.mark.asyncio
async def test_import_cycle_terminates(make_website):
    website = make_website(_page("b.css"), pages={
        "http://test/b.css": '@import "c.css";',
        "http://test/c.css": '@import "b.css";',
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/b.css", "http://test/c.css"]
    assert sorted(website.fetcher.requests) == ["http://test/b.css", "http://test/c.css"]


@pytest.mark.asyncio
async def test_shared_import_is_fetched_once(make_website):
    website = make_website(_page("b.css", "c.css"), pages={
        "http://test/b.css": '@import "d.css";',
        "http://test/c.css": '@import "d.css";',
        "http://test/d.css": "a { color: red }",
    })

    await load_css(website)

    assert website.fetcher.requests.count("http://test/d.css") == 1
    assert [css.url for css in website.css].count("http://test/d.css") == 1


@pytest.mark.asyncio
async def test_failing_sheet_is_skipped(make_website):
    website = make_website(_page("missing.css", "b.css", "c.css"), pages={
        "http://test/b.css": "a { color: red }",
        "http://test/c.css": "p { color: blue }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/b.css", "http://test/c.css"]


@pytest.mark.asyncio
async def test_duplicate_links_fetched_once(make_website):
    website = make_website(_page("b.css", "b.css", "/b.css"), pages={
        "http://test/b.css": "a { color: red }",
    })

    await load_css(website)

    assert website.fetcher.requests == ["http://test/b.css"]
    assert len(website.css) == 1


@pytest.mark.asyncio
async def test_import_resolves_against_the_sheet(make_website):
    website = make_website(_page("styles/b.css"), pages={
        "http://test/styles/b.css": '@import "c.css";',
        "http://test/styles/c.css": "a { color: red }",
    })

    await load_css(website)

    assert "http://test/styles/c.css" in website.fetcher.requests
    assert "http://test/c.css" not in website.fetcher.requests


@pytest.mark.asyncio
async def test_redirected_sheet_keeps_requested_url(make_website):
    website = make_website(_page("old.css"), pages={
        "http://test/old.css": FetchResult(
            url="http://test/new/old.css", status_code=200, headers={}, body='@import "c.css";'
        ),
        "http://test/new/c.css": "a { color: red }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/old.css", "http://test/new/c.css"]


@pytest.mark.asyncio
async def test_inline_style_and_its_imports(make_website):
    website = make_website(_page(style='@import "d.css"; .x { color: red }'), pages={
        "http://test/d.css": "a { color: red }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == [EMBED, "http://test/d.css"]


@pytest.mark.asyncio
async def test_links_come_before_style_blocks(make_website):
    website = make_website(_page("b.css", style=".x { color: red }"), pages={
        "http://test/b.css": "a { color: red }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/b.css", EMBED]


@pytest.mark.asyncio
async def test_link_media_is_kept(make_website):
    html = '<html><head><link rel="stylesheet" media="only screen and (min-width: 480px)" href="480.css"></head></html>'
    website = make_website(html, pages={"http://test/480.css": "a { color: red }"})

    await load_css(website)

    assert website.css[0].media == "only screen and (min-width: 480px)"


@pytest.mark.asyncio
async def test_unparseable_sheet_contributes_nothing(make_website, monkeypatch):
    from compat_scanner import loadcss

    real_verify = loadcss.verify

    def verify(text, rules=()):
        if "BROKEN" in text:
            raise ParseError("bad sheet")
        return real_verify(text, rules)

    monkeypatch.setattr(loadcss, "verify", verify)
    website = make_website(_page("bad.css", "good.css"), pages={
        "http://test/bad.css": "BROKEN",
        "http://test/good.css": "a { color: red }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/good.css"]


@pytest.mark.asyncio
async def test_page_url_is_base_for_links(make_website):
    website = make_website(_page("b.css"), url="http://test/dir/page.html", pages={
        "http://test/dir/b.css": "a { color: red }",
    })

    await load_css(website)

    assert website.fetcher.requests == ["http://test/dir/b.css"]


@pytest.mark.asyncio
async def test_malformed_href_is_skipped(make_website):
    website = make_website(_page("http://[broken/x.css", "good.css"), pages={
        "http://test/good.css": "a { color: red }",
    })

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/good.css"]
    assert website.fetcher.requests == ["http://test/good.css"]


class BrokenSelectorRule(CssRule):
    id = "broken-selector"

    def check(self, sheet):
        if any("broken" in rule.selectorText for rule in style_rules(sheet.cssRules)):
            raise AttributeError("unexpected rule shape")
        return []


@pytest.mark.asyncio
async def test_rule_failure_drops_only_that_sheet(make_website):
    website = make_website(
        _page("bad.css", "good.css", style=".broken { color: blue }"),
        pages={
            "http://test/bad.css": ".broken { color: red }",
            "http://test/good.css": "a { color: red }",
        },
        css_rules=[BrokenSelectorRule()],
    )

    await load_css(website)

    assert [css.url for css in website.css] == ["http://test/good.css"]
