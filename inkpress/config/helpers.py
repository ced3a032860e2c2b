"""Utility helpers shared by the inkpress configuration loader."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from inkpress.compiler.tags import TagTable, Wrapper

from .models import BuildConfigError

TAG_ALIASES: dict[str, str] = {
    "bold_text": "bold",
    "italic_text": "italic",
}


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_extension(value: object | None, default: str) -> str:
    """Return an extension without its leading dot."""
    text = _optional_str(value)
    if text is None:
        return default
    return text.removeprefix(".")


def _coerce_bool(key: str, value: object, default: bool) -> bool:
    """Accept YAML booleans only; anything else is a configuration error."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    msg = f"'{key}' must be true or false, got {value!r}."
    raise BuildConfigError(msg)


def _build_wrapper(kind: str, payload: object) -> Wrapper | None:
    """Build a Wrapper from a tag name, a mapping, or ``None`` (unwrapped)."""
    match payload:
        case None:
            return None
        case str() as tag if tag.strip():
            return Wrapper.element(tag.strip())
        case {"open": str() as opening, "close": str() as closing}:
            return Wrapper(opening, closing)
        case {"tag": str() as tag, **rest}:
            return Wrapper.element(tag.strip(), _optional_str(rest.get("class")))
        case _:
            msg = (
                f"Tag entry '{kind}' must be null, a tag name, or a mapping with "
                "'tag' (and optional 'class') or 'open'/'close'."
            )
            raise BuildConfigError(msg)


def _build_tag_table(payload: typ.Mapping[str, typ.Any] | None) -> TagTable:
    """Merge per-kind overrides into the default TagTable."""
    base = TagTable()
    if not payload:
        return base
    known = {field.name for field in dc.fields(base)}
    overrides: dict[str, Wrapper | None] = {}
    for raw_kind, entry in payload.items():
        kind = TAG_ALIASES.get(str(raw_kind), str(raw_kind))
        if kind not in known:
            msg = f"Unknown tag table entry '{raw_kind}'."
            raise BuildConfigError(msg)
        overrides[kind] = _build_wrapper(kind, entry)
    return base.replace(**overrides)


__all__ = [
    "TAG_ALIASES",
    "_build_tag_table",
    "_build_wrapper",
    "_coerce_bool",
    "_normalize_extension",
    "_optional_str",
]
