"""Shared dataclasses used by the site build pipeline."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from inkpress._constants import TEMPLATE_KEY
from inkpress.crawler import Page, PageFailure, SkippedFile

if typ.TYPE_CHECKING:
    from pathlib import Path

PageIndex = tuple[cabc.Mapping[str, str], ...]


@dc.dataclass(frozen=True, slots=True)
class Route:
    """Where one page is written and the metadata templates see for it.

    Attributes
    ----------
    page : Page
        The compiled page.
    path : str
        Output path relative to the output directory, e.g. ``"about.html"``.
    metadata : Mapping[str, str]
        Read-only view of the page metadata with ``path`` added.
    """

    page: Page
    path: str
    metadata: cabc.Mapping[str, str]

    @property
    def template(self) -> str:
        return self.metadata[TEMPLATE_KEY]


@dc.dataclass(frozen=True, slots=True)
class SitePlan:
    """Result of the first build pass.

    Attributes
    ----------
    routes : tuple[Route, ...]
        Pages to render, in crawl order.
    index : PageIndex
        Metadata of every routed page, shared read-only by every template
        expansion as ``global``.
    failures : tuple[PageFailure, ...]
        Pages left out because their route could not be computed.
    """

    routes: tuple[Route, ...]
    index: PageIndex
    failures: tuple[PageFailure, ...] = ()


@dc.dataclass(slots=True)
class BuildReport:
    """Everything a build wrote, copied, skipped, or failed on."""

    written: list[Path] = dc.field(default_factory=list)
    copied: list[Path] = dc.field(default_factory=list)
    failures: list[PageFailure] = dc.field(default_factory=list)
    skipped: list[SkippedFile] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


__all__ = ["BuildReport", "PageIndex", "Route", "SitePlan"]
