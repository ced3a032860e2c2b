"""Configurable wrapper tags used by the markup compiler."""

from __future__ import annotations

import dataclasses as dc
from html import escape


@dc.dataclass(frozen=True, slots=True)
class Wrapper:
    """Opening and closing HTML emitted around a node's compiled children."""

    open: str
    close: str

    @classmethod
    def element(cls, tag: str, css_class: str | None = None) -> Wrapper:
        """Build a wrapper for a single element with an optional class.

        Examples
        --------
        >>> Wrapper.element("span", "bold").open
        '<span class="bold">'
        """
        if css_class:
            attr = escape(css_class, quote=True)
            return cls(f'<{tag} class="{attr}">', f"</{tag}>")
        return cls(f"<{tag}>", f"</{tag}>")

    def wrap(self, inner: str) -> str:
        return f"{self.open}{inner}{self.close}"


@dc.dataclass(frozen=True, slots=True)
class TagTable:
    """Wrapper per container node kind.

    A ``None`` entry renders the children unwrapped.
    """

    heading: Wrapper | None = Wrapper.element("h1")
    text_block: Wrapper | None = Wrapper.element("p")
    bold: Wrapper | None = Wrapper.element("span", "bold")
    italic: Wrapper | None = Wrapper.element("span", "italic")
    sidenote: Wrapper | None = Wrapper.element("aside", "sidenote")
    code_block: Wrapper | None = Wrapper("<pre><code>", "</code></pre>")

    def replace(self, **overrides: Wrapper | None) -> TagTable:
        """Return a copy with the given wrappers swapped in."""
        unknown = set(overrides) - {field.name for field in dc.fields(self)}
        if unknown:
            msg = f"Unknown tag table entries: {', '.join(sorted(unknown))}"
            raise KeyError(msg)
        return dc.replace(self, **overrides)


__all__ = ["TagTable", "Wrapper"]
