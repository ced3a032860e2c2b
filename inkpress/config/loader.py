"""Load build configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from inkpress._constants import DEFAULT_DOCUMENT_EXTENSION, DEFAULT_OUTPUT_DIR

from .helpers import (
    _build_tag_table,
    _coerce_bool,
    _normalize_extension,
    _optional_str,
)
from .models import BuildConfig, BuildConfigError

KNOWN_KEYS: frozenset[str] = frozenset(
    {
        "output_dir",
        "document_extension",
        "follow_links",
        "fail_fast",
        "on_conflict",
        "index_manifest",
        "tags",
    }
)


def load_build_config(path: Path | None = None) -> BuildConfig:
    """Load the YAML file describing how a site is built.

    Parameters
    ----------
    path : Path or None, optional
        Filesystem path to the configuration file (for example,
        ``inkpress.yaml``). ``None`` returns the defaults.

    Returns
    -------
    BuildConfig
        Parsed configuration with defaults applied for omitted keys.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    BuildConfigError
        If the document is not a mapping, names unknown keys, or holds values
        of the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from inkpress.config import load_build_config
    >>> load_build_config().document_extension
    'md'
    >>> load_build_config(Path("inkpress.yaml")).output_dir  # doctest: +SKIP
    PosixPath('public')
    """
    if path is None:
        return BuildConfig()
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise BuildConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    unknown = sorted(set(raw) - KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise BuildConfigError(msg)

    tags_raw = raw.get("tags")
    if tags_raw is not None and not isinstance(tags_raw, dict):
        msg = "'tags' must be a mapping of node kinds to wrappers."
        raise BuildConfigError(msg)

    return BuildConfig(
        output_dir=Path(_optional_str(raw.get("output_dir")) or DEFAULT_OUTPUT_DIR),
        document_extension=_normalize_extension(
            raw.get("document_extension"), DEFAULT_DOCUMENT_EXTENSION
        ),
        follow_links=_coerce_bool("follow_links", raw.get("follow_links"), True),
        fail_fast=_coerce_bool("fail_fast", raw.get("fail_fast"), True),
        on_conflict=_optional_str(raw.get("on_conflict")) or "warn",
        index_manifest=_optional_str(raw.get("index_manifest")),
        tags=_build_tag_table(tags_raw),
    )


__all__ = ["load_build_config"]
