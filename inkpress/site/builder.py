"""High-level orchestration for building an inkpress site.

This module coordinates crawling ink documents and templates, planning every
page's output path, rendering each page through its declared Jinja template,
and copying static assets. It exposes :class:`SiteBuilder`, which consumes a
:class:`~inkpress.config.BuildConfig` plus the three source directories and
returns a :class:`~inkpress.site.models.BuildReport`.

Example
-------
>>> from pathlib import Path
>>> from inkpress.config import load_build_config
>>> from inkpress.site import SiteBuilder
>>> builder = SiteBuilder(
...     load_build_config(),
...     templates_dir=Path("templates"),
...     pages_dir=Path("pages"),
...     static_dir=Path("static"),
... )  # doctest: +SKIP
>>> builder.run().written  # doctest: +SKIP
[PosixPath('output/about.html'), PosixPath('output/index.html')]
"""

from __future__ import annotations

import json
import logging
import shutil
import typing as typ

from markupsafe import Markup

from inkpress._constants import CONTENT_KEY
from inkpress.compiler import DocumentCompiler
from inkpress.crawler import PageFailure, crawl_pages, crawl_templates
from inkpress.templates import RenderError, TemplateRegistry

from .models import BuildReport
from .planner import plan_site

if typ.TYPE_CHECKING:
    from pathlib import Path

    from inkpress.config import BuildConfig

    from .models import PageIndex, Route

logger = logging.getLogger(__name__)


class SiteBuilder:
    """Crawl pages and templates, then render themed HTML into one directory."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        templates_dir: Path,
        pages_dir: Path,
        static_dir: Path | None = None,
        compiler: DocumentCompiler | None = None,
    ) -> None:
        """Initialize the builder with configuration and source directories.

        Parameters
        ----------
        config : BuildConfig
            Output directory, crawl options, failure and conflict policies.
        templates_dir : Path
            Directory whose files are registered as templates by file name.
        pages_dir : Path
            Directory holding ink documents.
        static_dir : Path, optional
            Directory whose top-level files are copied verbatim into the
            output directory.
        compiler : DocumentCompiler, optional
            Document pipeline; defaults to one using ``config.tags``.
        """
        self.config = config
        self.templates_dir = templates_dir
        self.pages_dir = pages_dir
        self.static_dir = static_dir
        self.compiler = compiler or DocumentCompiler(tags=config.tags)
        self.registry = TemplateRegistry(on_conflict=config.on_conflict)

    def run(self) -> BuildReport:
        """Build the whole site.

        Returns
        -------
        BuildReport
            Written pages, copied assets, skipped files and, when
            ``config.fail_fast`` is off, the pages that failed.

        Raises
        ------
        MarkupParseError, MissingMetadataError, MalformedNameError, RenderError
            On the first page failure when ``config.fail_fast`` is on. Routing
            errors are raised before any file is written.
        TemplateRegistrationError
            If a template source is malformed.
        OSError
            If the output directory, a page, or a static asset cannot be
            written.

        Notes
        -----
        Every page is routed before the first one is rendered, so each template
        expansion sees the complete ``global`` page index.
        """
        report = BuildReport()
        self._register_templates(report)

        crawled = crawl_pages(
            self.pages_dir,
            compiler=self.compiler,
            extension=self.config.document_extension,
            follow_links=self.config.follow_links,
            fail_fast=self.config.fail_fast,
        )
        report.skipped.extend(crawled.skipped)
        report.failures.extend(crawled.failures)

        plan = plan_site(
            crawled.items,
            extension=self.config.document_extension,
            on_conflict=self.config.on_conflict,
            fail_fast=self.config.fail_fast,
        )
        report.failures.extend(plan.failures)

        out_dir = self.config.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)

        for route in plan.routes:
            try:
                html = self._render(route, plan.index)
            except RenderError as exc:
                if self.config.fail_fast:
                    raise
                logger.error("%s: %s", route.page.source, exc)
                report.failures.append(
                    PageFailure(
                        source=route.page.source, stage="render", message=str(exc)
                    )
                )
                continue
            output_path = out_dir / route.path
            output_path.write_text(html, encoding="utf-8")
            logger.debug("Rendered %s to %s", route.page.source, output_path)
            report.written.append(output_path)

        if self.static_dir is not None:
            report.copied.extend(copy_static(self.static_dir, out_dir))
        if self.config.index_manifest:
            self._write_index_manifest(plan.index)
        return report

    def _register_templates(self, report: BuildReport) -> None:
        """Crawl the templates directory and register each file by name."""
        crawled = crawl_templates(
            self.templates_dir, follow_links=self.config.follow_links
        )
        report.skipped.extend(crawled.skipped)
        for template in crawled.items:
            self.registry.register(template.name, template.source)

    def _render(self, route: Route, index: PageIndex) -> str:
        """Expand the route's template with ``page`` and ``global`` bindings."""
        page_context = dict(route.metadata)
        page_context[CONTENT_KEY] = Markup(route.page.content)
        return self.registry.render(
            route.template, {"page": page_context, "global": index}
        )

    def _write_index_manifest(self, index: PageIndex) -> None:
        """Persist the global page index as JSON next to the rendered pages."""
        path = self.config.output_dir / typ.cast("str", self.config.index_manifest)
        entries = [dict(entry) for entry in index]
        path.write_text(json.dumps(entries, indent=2), encoding="utf-8")


def copy_static(static_dir: Path, output_dir: Path) -> list[Path]:
    """Copy the regular files directly inside ``static_dir`` into ``output_dir``.

    Subdirectories are not descended into. Any copy failure propagates.
    """
    copied: list[Path] = []
    for entry in sorted(static_dir.iterdir()):
        if not entry.is_file():
            continue
        target = output_dir / entry.name
        shutil.copyfile(entry, target)
        copied.append(target)
    return copied


__all__ = ["SiteBuilder", "copy_static"]
