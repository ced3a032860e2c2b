"""Discover ink documents and templates on disk.

The crawler walks a root directory (optionally through symbolic links), reads
each selected file as UTF-8 text and hands documents to the
:class:`~inkpress.compiler.DocumentCompiler`. Files that cannot be read are
logged and skipped so one unreadable file does not stop the crawl. Files are
visited in sorted relative-path order, which makes the page order, and any
last-one-wins resolution of duplicate names, reproducible across machines.

Example
-------
>>> from pathlib import Path
>>> from inkpress.compiler import DocumentCompiler
>>> from inkpress.crawler import crawl_pages
>>> result = crawl_pages(Path("pages"), compiler=DocumentCompiler())  # doctest: +SKIP
>>> [page.name for page in result.items]  # doctest: +SKIP
['about.md', 'index.md']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from ._constants import DEFAULT_DOCUMENT_EXTENSION
from .grammar import MarkupParseError

if typ.TYPE_CHECKING:
    from .compiler import DocumentCompiler

logger = logging.getLogger(__name__)

T = typ.TypeVar("T")


@dc.dataclass(frozen=True, slots=True)
class Page:
    """One compiled ink document.

    Attributes
    ----------
    source : Path
        File the page was read from.
    metadata : dict[str, str]
        Key/value pairs declared in the document's metadata block.
    content : str
        Rendered HTML body.
    """

    source: Path
    metadata: dict[str, str]
    content: str

    @property
    def name(self) -> str:
        return self.source.name


@dc.dataclass(frozen=True, slots=True)
class TemplateSource:
    """Raw template text and the name it is registered under."""

    name: str
    path: Path
    source: str


@dc.dataclass(frozen=True, slots=True)
class SkippedFile:
    """A file the crawler could not read."""

    path: Path
    reason: str


@dc.dataclass(frozen=True, slots=True)
class PageFailure:
    """A page that failed at one build stage (parse, plan, or render)."""

    source: Path
    stage: str
    message: str


@dc.dataclass(slots=True)
class CrawlResult(typ.Generic[T]):
    """Items collected by a crawl together with what was left out."""

    items: list[T] = dc.field(default_factory=list)
    skipped: list[SkippedFile] = dc.field(default_factory=list)
    failures: list[PageFailure] = dc.field(default_factory=list)


def walk_files(root: Path, *, follow_links: bool = True) -> list[Path]:
    """Return every regular file below ``root`` in sorted relative order.

    Parameters
    ----------
    root : Path
        Directory to walk recursively.
    follow_links : bool, optional
        Descend into symlinked directories and include symlinked files.
        Directories reached twice through links are visited once.

    Raises
    ------
    FileNotFoundError
        If ``root`` is not an existing directory.
    """
    if not root.is_dir():
        msg = f"Directory '{root}' not found."
        raise FileNotFoundError(msg)

    found: list[Path] = []
    seen: set[str] = set()
    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_links):
        real = os.path.realpath(dirpath)
        if real in seen:
            dirnames[:] = []
            continue
        seen.add(real)
        for filename in filenames:
            candidate = Path(dirpath) / filename
            if candidate.is_symlink() and not follow_links:
                continue
            if candidate.is_file():
                found.append(candidate)
    return sorted(found, key=lambda path: path.relative_to(root).as_posix())


def _read_text(path: Path, skipped: list[SkippedFile]) -> str | None:
    """Read ``path`` as UTF-8, recording and logging failures."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Error while reading %s: %s", path, exc)
        skipped.append(SkippedFile(path=path, reason=str(exc)))
        return None


def crawl_pages(
    root: Path,
    *,
    compiler: DocumentCompiler,
    extension: str = DEFAULT_DOCUMENT_EXTENSION,
    follow_links: bool = True,
    fail_fast: bool = True,
) -> CrawlResult[Page]:
    """Read and compile every ink document below ``root``.

    Parameters
    ----------
    root : Path
        Directory holding the ink sources.
    compiler : DocumentCompiler
        Pipeline turning source text into metadata and HTML.
    extension : str, optional
        Extension (without the dot) that selects documents.
    follow_links : bool, optional
        Whether to follow symbolic links while walking.
    fail_fast : bool, optional
        Re-raise the first parse failure instead of recording it.

    Returns
    -------
    CrawlResult[Page]
        Compiled pages in crawl order, plus skipped files and, when
        ``fail_fast`` is off, parse failures.

    Raises
    ------
    MarkupParseError
        If a document does not parse and ``fail_fast`` is on. The error names
        the offending file.
    """
    result: CrawlResult[Page] = CrawlResult()
    suffix = f".{extension}"
    for path in walk_files(root, follow_links=follow_links):
        if path.suffix != suffix:
            continue
        text = _read_text(path, result.skipped)
        if text is None:
            continue
        try:
            compiled = compiler.compile_document(text)
        except MarkupParseError as exc:
            error = exc.with_source(path)
            if fail_fast:
                raise error from exc
            logger.error("%s", error)
            result.failures.append(
                PageFailure(source=path, stage="parse", message=str(error))
            )
            continue
        result.items.append(
            Page(source=path, metadata=compiled.metadata, content=compiled.html)
        )
    return result


def crawl_templates(
    root: Path, *, follow_links: bool = True
) -> CrawlResult[TemplateSource]:
    """Read every file below ``root`` as a template named after its file name."""
    result: CrawlResult[TemplateSource] = CrawlResult()
    for path in walk_files(root, follow_links=follow_links):
        text = _read_text(path, result.skipped)
        if text is None:
            continue
        result.items.append(TemplateSource(name=path.name, path=path, source=text))
    return result


__all__ = [
    "CrawlResult",
    "Page",
    "PageFailure",
    "SkippedFile",
    "TemplateSource",
    "crawl_pages",
    "crawl_templates",
    "walk_files",
]
