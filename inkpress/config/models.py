"""Typed dataclasses describing inkpress build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from inkpress._constants import DEFAULT_DOCUMENT_EXTENSION, DEFAULT_OUTPUT_DIR
from inkpress.compiler.tags import TagTable

CONFLICT_POLICIES: tuple[str, ...] = ("warn", "error")


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class BuildConfig:
    """Settings shared by the crawler, compiler, and site builder.

    Attributes
    ----------
    output_dir : Path
        Directory receiving rendered pages and copied static assets.
    document_extension : str
        File extension (without the dot) that marks ink sources.
    follow_links : bool
        Follow symbolic links while walking page and template roots.
    fail_fast : bool
        Abort on the first page failure; when ``False`` failures are collected
        into the build report and the remaining pages are still rendered.
    on_conflict : str
        ``"warn"`` keeps the last page or template sharing a name, ``"error"``
        aborts the build.
    index_manifest : str or None
        File name for a JSON copy of the global page index, written into
        ``output_dir``; ``None`` disables it.
    tags : TagTable
        Wrapper tags used by the markup compiler.
    """

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    document_extension: str = DEFAULT_DOCUMENT_EXTENSION
    follow_links: bool = True
    fail_fast: bool = True
    on_conflict: str = "warn"
    index_manifest: str | None = None
    tags: TagTable = dc.field(default_factory=TagTable)

    def __post_init__(self) -> None:
        if self.on_conflict not in CONFLICT_POLICIES:
            allowed = ", ".join(CONFLICT_POLICIES)
            msg = f"Unknown on_conflict policy '{self.on_conflict}' (use {allowed})."
            raise BuildConfigError(msg)
        if not self.document_extension or "." in self.document_extension:
            msg = (
                "document_extension must be a bare extension such as 'md', "
                f"got '{self.document_extension}'."
            )
            raise BuildConfigError(msg)


__all__ = ["CONFLICT_POLICIES", "BuildConfig", "BuildConfigError"]
