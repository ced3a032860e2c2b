"""First build pass: compute output paths and the global page index.

:func:`plan_site` is a pure function of the crawled pages. It never touches
the filesystem, so every route is known before any page is rendered and the
resulting index can be shared read-only by all template expansions.

Example
-------
>>> from pathlib import Path
>>> from inkpress.crawler import Page
>>> from inkpress.site.planner import plan_site
>>> page = Page(Path("pages/hello.md"), {"template": "post.html"}, "<p>hi</p>")
>>> plan = plan_site([page])
>>> plan.routes[0].path
'hello.html'
>>> dict(plan.index[0])
{'template': 'post.html', 'path': 'hello.html'}
"""

from __future__ import annotations

import logging
import re
import types
import typing as typ

from inkpress._constants import DEFAULT_DOCUMENT_EXTENSION, PATH_KEY, TEMPLATE_KEY
from inkpress.crawler import Page, PageFailure

from .models import Route, SitePlan

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

TEMPLATE_NAME_PATTERN = re.compile(r"^(.*)\.(.+)$", re.DOTALL)


class MissingMetadataError(ValueError):
    """Raised when a page does not declare a required metadata key."""


class MalformedNameError(ValueError):
    """Raised when a template or page file name lacks the expected extension."""


class RouteConflictError(ValueError):
    """Raised when two pages compute the same output path."""


def template_extension(template_name: str) -> str:
    """Return the extension a template gives to the pages it renders.

    Raises
    ------
    MalformedNameError
        If ``template_name`` has no ``name.ext`` shape.

    Examples
    --------
    >>> template_extension("feed.rss.xml")
    'xml'
    """
    match = TEMPLATE_NAME_PATTERN.match(template_name)
    if match is None:
        msg = f"Template name '{template_name}' has no file extension."
        raise MalformedNameError(msg)
    return match.group(2)


def page_base_name(page: Page, extension: str) -> str:
    """Strip the document extension from the page's file name."""
    suffix = f".{extension}"
    name = page.source.name
    if not name.endswith(suffix) or name == suffix:
        msg = f"Page '{page.source}' does not end with '{suffix}'."
        raise MalformedNameError(msg)
    return name[: -len(suffix)]


def route_page(page: Page, *, extension: str = DEFAULT_DOCUMENT_EXTENSION) -> Route:
    """Compute the route of a single page.

    Parameters
    ----------
    page : Page
        Compiled page whose metadata must declare ``template``.
    extension : str, optional
        Document extension stripped from the page file name.

    Returns
    -------
    Route
        Output path ``<page base name>.<template extension>`` and the page
        metadata extended with ``path``.

    Raises
    ------
    MissingMetadataError
        If the page declares no ``template``.
    MalformedNameError
        If the template or page file name has no extension.
    """
    template = page.metadata.get(TEMPLATE_KEY)
    if template is None:
        msg = f"Page '{page.source}' does not declare a '{TEMPLATE_KEY}'."
        raise MissingMetadataError(msg)
    path = f"{page_base_name(page, extension)}.{template_extension(template)}"
    metadata = types.MappingProxyType({**page.metadata, PATH_KEY: path})
    return Route(page=page, path=path, metadata=metadata)


def plan_site(
    pages: cabc.Iterable[Page],
    *,
    extension: str = DEFAULT_DOCUMENT_EXTENSION,
    on_conflict: str = "warn",
    fail_fast: bool = True,
) -> SitePlan:
    """Route every page and assemble the global page index.

    Parameters
    ----------
    pages : Iterable[Page]
        Pages in crawl order.
    extension : str, optional
        Document extension stripped from page file names.
    on_conflict : str, optional
        ``"warn"`` logs pages sharing an output path and keeps every route,
        so the later page overwrites the earlier file in pass 2 while both
        stay in the index; ``"error"`` raises.
    fail_fast : bool, optional
        Re-raise the first routing error instead of recording it.

    Returns
    -------
    SitePlan
        Routes and index in crawl order, plus failures when ``fail_fast`` is
        off.

    Raises
    ------
    MissingMetadataError, MalformedNameError
        When a page cannot be routed and ``fail_fast`` is on.
    RouteConflictError
        When two pages share an output path and ``on_conflict`` is ``"error"``.
    """
    routes: list[Route] = []
    claimed: dict[str, Route] = {}
    failures: list[PageFailure] = []
    for page in pages:
        try:
            route = route_page(page, extension=extension)
        except (MissingMetadataError, MalformedNameError) as exc:
            if fail_fast:
                raise
            logger.error("%s", exc)
            failures.append(
                PageFailure(source=page.source, stage="plan", message=str(exc))
            )
            continue
        earlier = claimed.get(route.path)
        if earlier is not None:
            if on_conflict == "error":
                msg = (
                    f"Pages '{earlier.page.source}' and '{page.source}' both "
                    f"render to '{route.path}'."
                )
                raise RouteConflictError(msg)
            logger.warning(
                "%s overwrites %s at %s", page.source, earlier.page.source, route.path
            )
        claimed[route.path] = route
        routes.append(route)

    ordered = tuple(routes)
    return SitePlan(
        routes=ordered,
        index=tuple(route.metadata for route in ordered),
        failures=tuple(failures),
    )


__all__ = [
    "MalformedNameError",
    "MissingMetadataError",
    "RouteConflictError",
    "page_base_name",
    "plan_site",
    "route_page",
    "template_extension",
]
