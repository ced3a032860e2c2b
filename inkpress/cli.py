"""Cyclopts CLI entrypoint for building inkpress sites.

The ``inkpress`` console script defined here compiles a directory of ink
documents through a directory of Jinja templates into a static site, copying
an optional directory of static assets alongside. ``inkpress convert`` renders
a single document to standard output, which is handy when writing templates.

Examples
--------
Build a site with the default configuration:

>>> from inkpress.cli import app
>>> app(["templates", "pages", "static"])  # doctest: +SKIP

Keep going past broken pages and write into a custom directory:

>>> app(
...     ["templates", "pages", "--output-dir", "dist", "--keep-going"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from jinja2 import TemplateError

from ._constants import DEFAULT_CONFIG_NAME
from .compiler import DocumentCompiler
from .config import BuildConfigError, load_build_config
from .grammar import MarkupParseError
from .site import (
    MalformedNameError,
    MissingMetadataError,
    RouteConflictError,
    SiteBuilder,
)
from .templates import RenderError, TemplateConflictError, TemplateRegistrationError

USAGE = (
    "usage: inkpress TEMPLATES PAGES [STATIC] "
    "[--config FILE] [--output-dir DIR] [--keep-going]"
)

FATAL_ERRORS: tuple[type[Exception], ...] = (
    BuildConfigError,
    MarkupParseError,
    MissingMetadataError,
    MalformedNameError,
    RouteConflictError,
    TemplateConflictError,
    TemplateRegistrationError,
    RenderError,
    TemplateError,
    OSError,
)

app = App(
    name="inkpress",
    help="Compile ink documents into a static site.",
    config=cyclopts.config.Env("INKPRESS_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config(config: Path | None) -> Path | None:
    """Return the explicit config path, or inkpress.yaml when present in the cwd."""
    if config is not None:
        return config
    default = Path(DEFAULT_CONFIG_NAME)
    return default if default.is_file() else None


def _fail(exc: Exception) -> typ.NoReturn:
    """Print a diagnostic for a fatal error and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


@app.default
def build(
    templates: typ.Annotated[
        Path | None, Parameter(help="Directory of templates")
    ] = None,
    pages: typ.Annotated[
        Path | None, Parameter(help="Directory of ink documents")
    ] = None,
    static: typ.Annotated[
        Path | None, Parameter(help="Directory of static assets")
    ] = None,
    *,
    config: typ.Annotated[
        Path | None,
        Parameter(
            help="Path to an inkpress.yaml build config", env_var="INKPRESS_CONFIG"
        ),
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    keep_going: typ.Annotated[
        bool, Parameter(help="Render remaining pages after a page fails")
    ] = False,
) -> None:
    """Build a static site from templates, ink documents, and static assets.

    Parameters
    ----------
    templates : Path or None
        Directory whose files are registered as templates by file name.
    pages : Path or None
        Directory holding the ink documents.
    static : Path or None, optional
        Directory whose top-level files are copied into the output folder.
    config : Path or None, optional
        Build configuration file. Falls back to ``inkpress.yaml`` in the
        working directory, then to the built-in defaults.
    output_dir : Path or None, optional
        Overrides ``output_dir`` from the configuration.
    keep_going : bool, optional
        Collect page failures instead of stopping at the first one.

    Returns
    -------
    None
        Writes the site and prints each generated path. Prints a usage message
        and returns normally when ``templates`` or ``pages`` is missing.

    Raises
    ------
    SystemExit
        With status 1 after a fatal error, or when any page failed under
        ``--keep-going``.
    """
    if templates is None or pages is None:
        print(USAGE)
        return

    try:
        build_config = load_build_config(_resolve_config(config))
        overrides: dict[str, typ.Any] = {}
        if output_dir is not None:
            overrides["output_dir"] = output_dir
        if keep_going:
            overrides["fail_fast"] = False
        if overrides:
            build_config = dc.replace(build_config, **overrides)
        report = SiteBuilder(
            build_config, templates_dir=templates, pages_dir=pages, static_dir=static
        ).run()
    except FATAL_ERRORS as exc:
        _fail(exc)

    for path in report.written:
        print(f"wrote {_format_path(path)}")
    for path in report.copied:
        print(f"copied {_format_path(path)}")
    for skipped in report.skipped:
        print(
            f"skipped {_format_path(skipped.path)}: {skipped.reason}", file=sys.stderr
        )
    for failure in report.failures:
        label = f"{_format_path(failure.source)} ({failure.stage})"
        print(f"failed {label}: {failure.message}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


@app.command(help="Compile a single ink document to HTML on stdout.")
def convert(
    source: typ.Annotated[Path, Parameter(help="Ink document to compile")],
    *,
    blocks: typ.Annotated[
        bool, Parameter(help="Parse a bare block sequence without metadata")
    ] = False,
    config: typ.Annotated[
        Path | None,
        Parameter(
            help="Path to an inkpress.yaml build config", env_var="INKPRESS_CONFIG"
        ),
    ] = None,
) -> None:
    """Print the HTML body of ``source``.

    With ``--blocks`` the file is parsed as a plain sequence of blocks, so a
    leading ``---`` line is treated as text rather than a metadata block. The
    ``tags`` table of the build configuration applies, as it does for builds.
    """
    try:
        build_config = load_build_config(_resolve_config(config))
    except (BuildConfigError, OSError) as exc:
        _fail(exc)
    compiler = DocumentCompiler(tags=build_config.tags)
    try:
        text = source.read_text(encoding="utf-8")
        if blocks:
            html = compiler.convert(text)
        else:
            html = compiler.compile_document(text).html
    except MarkupParseError as exc:
        _fail(exc.with_source(source))
    except (OSError, UnicodeDecodeError) as exc:
        _fail(exc)
    print(html)


@app.command(name="help", help="Show usage information.")
def help_command() -> None:
    """Print the usage message and the command overview."""
    print(USAGE)
    app.help_print()


def main() -> None:
    """Invoke the Cyclopts application that powers the `inkpress` console command.

    Parameters
    ----------
    None

    Returns
    -------
    None
        This function executes for its side effects of parsing CLI arguments
        and running the requested command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
