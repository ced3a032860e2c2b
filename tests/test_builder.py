"""Tests for planning and building complete sites.

Each test lays out ``templates``, ``pages`` and ``static`` directories under
``tmp_path`` and drives :class:`inkpress.site.SiteBuilder` (or the pure
:func:`inkpress.site.plan_site` pass) against them.

Usage
-----
Run ``pytest tests/test_builder.py -v``. Only the filesystem under
``tmp_path`` is touched.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from inkpress.config import BuildConfig
from inkpress.crawler import Page
from inkpress.grammar import MarkupParseError
from inkpress.site import (
    MalformedNameError,
    MissingMetadataError,
    RouteConflictError,
    SiteBuilder,
    copy_static,
    plan_site,
    route_page,
)
from inkpress.templates import RenderError, TemplateConflictError

PAGE_TEMPLATE = (
    "<html><body>{{ page.content }}<ul>"
    "{% for entry in global %}"
    '<li><a href="{{ entry.path }}">{{ entry.title }}</a></li>'
    "{% endfor %}"
    "</ul></body></html>"
)


def _page(title: str, body: str, template: str = "page.html") -> str:
    return f"---\ntemplate: {template}\ntitle: {title}\n---\n{body}\n"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _mkdir(path: Path) -> Path:
    path.mkdir(parents=True)
    return path


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Create a two-page site with one template and one static asset."""
    _write(tmp_path / "templates" / "page.html", PAGE_TEMPLATE)
    alpha = _page("Alpha", "# Alpha\n\nFirst *page*.")
    _write(tmp_path / "pages" / "alpha.md", alpha)
    _write(tmp_path / "pages" / "beta.md", _page("Beta", "Second _page_."))
    _write(tmp_path / "static" / "style.css", "body { margin: 0; }\n")
    return tmp_path


def _builder(
    root: Path, *, with_static: bool = True, **overrides: typ.Any
) -> SiteBuilder:
    config = dc.replace(BuildConfig(), output_dir=root / "output", **overrides)
    return SiteBuilder(
        config,
        templates_dir=root / "templates",
        pages_dir=root / "pages",
        static_dir=root / "static" if with_static else None,
    )


def test_route_page_uses_template_extension() -> None:
    page = Page(Path("pages/about.md"), {"template": "feed.rss.xml"}, "")
    route = route_page(page)
    assert route.path == "about.xml"
    assert route.metadata["path"] == "about.xml"
    assert "path" not in page.metadata, "page metadata must not be mutated"


def test_route_page_rejects_extensionless_template() -> None:
    page = Page(Path("pages/about.md"), {"template": "layout"}, "")
    with pytest.raises(MalformedNameError, match="layout"):
        route_page(page)


def test_plan_preserves_crawl_order() -> None:
    pages = [
        Page(Path("pages/b.md"), {"template": "t.html", "title": "B"}, ""),
        Page(Path("pages/a.md"), {"template": "t.html", "title": "A"}, ""),
    ]
    plan = plan_site(pages)
    assert [entry["title"] for entry in plan.index] == ["B", "A"]
    assert [route.path for route in plan.routes] == ["b.html", "a.html"]


def test_build_renders_every_page_with_global_index(site: Path) -> None:
    report = _builder(site).run()

    output = site / "output"
    assert report.ok
    assert report.written == [output / "alpha.html", output / "beta.html"]
    assert report.copied == [output / "style.css"]

    alpha_html = (output / "alpha.html").read_text(encoding="utf-8")
    alpha = BeautifulSoup(alpha_html, "html.parser")
    assert alpha.h1 is not None
    assert alpha.h1.get_text() == "Alpha"
    assert alpha.select_one("p span.bold").get_text() == "page"
    links = [(a["href"], a.get_text()) for a in alpha.select("ul li a")]
    assert links == [("alpha.html", "Alpha"), ("beta.html", "Beta")]

    beta = (output / "beta.html").read_text(encoding="utf-8")
    assert '<span class="italic">page</span>' in beta, "content must not be escaped"
    assert (output / "style.css").read_text(encoding="utf-8") == (
        "body { margin: 0; }\n"
    )


def test_metadata_values_are_escaped_by_the_template(site: Path) -> None:
    _write(site / "pages" / "alpha.md", _page("A <b> & co", "Body."))
    _builder(site).run()
    html = (site / "output" / "alpha.html").read_text(encoding="utf-8")
    assert "A &lt;b&gt; &amp; co" in html


def test_missing_template_key_aborts_before_writing(site: Path) -> None:
    _write(site / "pages" / "gamma.md", "---\ntitle: Gamma\n---\nNo template.\n")
    with pytest.raises(MissingMetadataError, match="gamma.md"):
        _builder(site).run()
    assert not (site / "output").exists(), "no output may be written"


def test_parse_failure_names_the_page(site: Path) -> None:
    _write(site / "pages" / "broken.md", _page("Broken", "an *unterminated bold"))
    with pytest.raises(MarkupParseError) as excinfo:
        _builder(site).run()
    assert excinfo.value.source == site / "pages" / "broken.md"
    assert not (site / "output").exists()


def test_unregistered_template_is_a_render_error(site: Path) -> None:
    _write(site / "pages" / "alpha.md", _page("Alpha", "Body.", "missing.html"))
    with pytest.raises(RenderError, match="missing.html"):
        _builder(site).run()


def test_keep_going_collects_failures(site: Path) -> None:
    _write(site / "pages" / "broken.md", _page("Broken", "oops _open"))
    _write(site / "pages" / "gamma.md", "---\ntitle: Gamma\n---\nNo template.\n")
    _write(site / "pages" / "delta.md", _page("Delta", "Body.", "missing.html"))

    report = _builder(site, fail_fast=False).run()

    assert not report.ok
    stages = {failure.source.name: failure.stage for failure in report.failures}
    assert stages == {"broken.md": "parse", "gamma.md": "plan", "delta.md": "render"}
    written = sorted(path.name for path in report.written)
    assert written == ["alpha.html", "beta.html"]


def test_existing_output_directory_is_reused(site: Path) -> None:
    (site / "output").mkdir()
    _write(site / "output" / "keep.txt", "untouched")
    report = _builder(site).run()
    assert report.ok
    assert (site / "output" / "keep.txt").read_text(encoding="utf-8") == "untouched"


def test_static_copy_is_not_recursive(site: Path) -> None:
    _write(site / "static" / "fonts" / "ink.woff", "font")
    copied = copy_static(site / "static", _mkdir(site / "out"))
    assert copied == [site / "out" / "style.css"]
    assert not (site / "out" / "fonts").exists()


def test_build_without_static_directory(site: Path) -> None:
    report = _builder(site, with_static=False).run()
    assert report.copied == []
    assert not (site / "output" / "style.css").exists()


def test_documents_filtered_by_extension(site: Path) -> None:
    _write(site / "pages" / "notes.txt", "not *closed")
    report = _builder(site).run()
    assert [path.name for path in report.written] == ["alpha.html", "beta.html"]


def test_route_conflict_overwrites_but_keeps_every_index_entry(
    site: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write(site / "pages" / "nested" / "alpha.md", _page("Nested", "Later."))
    with caplog.at_level("WARNING", logger="inkpress.site.planner"):
        report = _builder(site).run()

    output = site / "output"
    assert report.written == [
        output / "alpha.html",
        output / "beta.html",
        output / "alpha.html",
    ]
    assert "overwrites" in caplog.text
    html = (output / "alpha.html").read_text(encoding="utf-8")
    assert "Later." in html, "the later page in crawl order is written last"
    soup = BeautifulSoup(html, "html.parser")
    titles = [a.get_text() for a in soup.select("ul li a")]
    assert titles == ["Alpha", "Beta", "Nested"]


def test_plan_keeps_pages_sharing_an_output_path() -> None:
    pages = [
        Page(Path("pages/a.md"), {"template": "t.html", "title": "A"}, ""),
        Page(Path("pages/b.md"), {"template": "t.html", "title": "B"}, ""),
        Page(Path("pages/sub/a.md"), {"template": "t.html", "title": "A2"}, ""),
    ]
    plan = plan_site(pages)
    assert [entry["title"] for entry in plan.index] == ["A", "B", "A2"]
    assert [route.path for route in plan.routes] == ["a.html", "b.html", "a.html"]


def test_route_conflict_can_be_fatal(site: Path) -> None:
    _write(site / "pages" / "nested" / "alpha.md", _page("Nested", "Later."))
    with pytest.raises(RouteConflictError, match="alpha.html"):
        _builder(site, on_conflict="error").run()


def test_template_name_conflict_policies(site: Path) -> None:
    _write(site / "templates" / "nested" / "page.html", "nested {{ page.content }}")

    report = _builder(site).run()
    html = (site / "output" / "alpha.html").read_text(encoding="utf-8")
    assert report.ok
    assert not html.startswith("nested"), "the later template in crawl order wins"

    with pytest.raises(TemplateConflictError, match="page.html"):
        _builder(site, on_conflict="error").run()


def test_index_manifest_is_written_when_enabled(site: Path) -> None:
    _builder(site, index_manifest="index.json").run()
    manifest = (site / "output" / "index.json").read_bytes()
    entries = msgspec_json.decode(manifest, type=list[dict[str, str]])
    assert entries == [
        {"template": "page.html", "title": "Alpha", "path": "alpha.html"},
        {"template": "page.html", "title": "Beta", "path": "beta.html"},
    ]


def test_output_directory_creation_failure_propagates(site: Path) -> None:
    _write(site / "output", "a file where the output directory should be")
    with pytest.raises(OSError):
        _builder(site).run()


def test_static_copy_failure_is_fatal(site: Path) -> None:
    (site / "output" / "style.css").mkdir(parents=True)
    with pytest.raises(OSError):
        _builder(site).run()
    assert (site / "output" / "alpha.html").is_file()
