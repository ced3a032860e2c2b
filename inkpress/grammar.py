r"""Declare the ink grammar and lower parsimonious trees into parse nodes.

Ink is a small line-oriented markup. A document optionally opens with a
metadata block and continues with blocks separated by blank lines::

    ---
    template: post.html
    title: Hello
    ---
    # A heading

    Prose with *bold*, _italic_, a ^[sidenote] and a [link](https://example.com).

    ```
    code, where *inline markup* is still compiled
    ```

    ++++
    <div class="raw">emitted verbatim</div>
    ++++

A marker that cannot open a construct is literal text: ``*`` or ``_`` before
whitespace, ``_`` inside a word (``snake_case``), ``^`` not followed by ``[``,
``[`` that does not start a complete link, and a stray ``]``. A marker that
does open a construct which is never closed (``an *unclosed span``) is a parse
failure. Code blocks accept every lone marker as literal text.

Example
-------
>>> from inkpress.grammar import MarkupGrammar
>>> tree = MarkupGrammar().parse("Hello *world*", entry="blocks")
>>> [child.kind.value for child in tree.children]
['text_block', 'eoi']
"""

from __future__ import annotations

import typing as typ

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar

from .tree import LEAF_KINDS, NodeKind, ParseNode

if typ.TYPE_CHECKING:
    from pathlib import Path

    from parsimonious.nodes import Node

INK_GRAMMAR = r"""
document    = metadata? separator article eoi
blocks      = separator (block separator)* eoi
article     = (block separator)*

metadata    = ~r"---[ \t]*\r?\n" property* ~r"---[ \t]*(?:\r?\n|\Z)"
property    = key colon value newline
key         = ~r"[A-Za-z0-9_.-]+"
colon       = ~r"[ \t]*:[ \t]*"
value       = ~r"[^\r\n]*"

block       = heading / code_block / raw_block / text_block
heading     = ~r"# +" (!newline inline)+
text_block  = inline+
code_block  = "```" (!"```" code_inline)* "```"
raw_block   = ~r"\+\+\+\+.*?\+\+\+\+"s

inline      = char / lone_marker / bold / italic / sidenote / link
code_inline = bold / italic / sidenote / link / code_char
bold        = "*" (!"*" inline)+ "*"
italic      = "_" (!"_" inline)+ "_"
sidenote    = "^[" (!"]" inline)+ "]"
link        = "[" link_name "](" link_url ")"
link_name   = ~r"[^\]\r\n]+"
link_url    = ~r"[^)\s]+"

char        = ~r"[^*_\[\]^\r\n]+|\r?\n(?![ \t]*(?:\r?\n|# |```|\+\+\+\+|\Z))"
lone_marker = ~r"[*_](?=[ \t\r\n]|\Z)"
            / ~r"(?<=[A-Za-z0-9])_(?=[A-Za-z0-9])"
            / ~r"\^(?!\[)"
            / ~r"\[(?![^\]\r\n]+\]\([^)\s]+\))"
            / "]"
code_char   = ~r"[^*_\[\]^`]+|[*_\[\]^`]"

newline     = ~r"\r?\n"
separator   = ~r"\s*"
eoi         = ~r"\Z"
"""

ENTRY_RULES: tuple[str, ...] = ("document", "blocks")

RULE_KINDS: dict[str, NodeKind] = {
    "document": NodeKind.DOCUMENT,
    "blocks": NodeKind.BLOCKS,
    "article": NodeKind.ARTICLE,
    "metadata": NodeKind.METADATA,
    "property": NodeKind.PROPERTY,
    "key": NodeKind.KEY,
    "value": NodeKind.VALUE,
    "heading": NodeKind.HEADING,
    "text_block": NodeKind.TEXT_BLOCK,
    "code_block": NodeKind.CODE_BLOCK,
    "raw_block": NodeKind.RAW_BLOCK,
    "bold": NodeKind.BOLD,
    "italic": NodeKind.ITALIC,
    "sidenote": NodeKind.SIDENOTE,
    "link": NodeKind.LINK,
    "link_name": NodeKind.LINK_NAME,
    "link_url": NodeKind.LINK_URL,
    "char": NodeKind.CHAR,
    "code_char": NodeKind.CHAR,
    "lone_marker": NodeKind.CHAR,
    "eoi": NodeKind.EOI,
}

# Helper rules whose children are spliced into the enclosing node.
SILENT_RULES: frozenset[str] = frozenset(
    {"block", "inline", "code_inline", "colon", "newline", "separator"}
)


class MarkupParseError(ValueError):
    """Raised when ink source text does not match the grammar."""

    def __init__(
        self,
        message: str,
        *,
        line: int,
        column: int,
        source: Path | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.source = source
        location = f"{source}:{line}:{column}" if source else f"{line}:{column}"
        super().__init__(f"{location}: {message}")

    def with_source(self, source: Path) -> MarkupParseError:
        """Return a copy of this error that names ``source``."""
        return MarkupParseError(
            self.message, line=self.line, column=self.column, source=source
        )


class MarkupGrammar:
    """Parse ink text with parsimonious and return :class:`ParseNode` trees."""

    def __init__(self, rules: str = INK_GRAMMAR) -> None:
        """Compile the PEG ``rules`` once for reuse across documents.

        Parameters
        ----------
        rules : str, optional
            Parsimonious grammar source; defaults to :data:`INK_GRAMMAR`.
        """
        self._grammar = Grammar(rules)

    def parse(self, text: str, *, entry: str = "document") -> ParseNode:
        """Parse ``text`` starting from the ``entry`` production.

        Parameters
        ----------
        text : str
            Full ink source.
        entry : str, optional
            ``"document"`` (metadata block plus article) or ``"blocks"`` (a
            bare block sequence).

        Returns
        -------
        ParseNode
            Root node of kind ``DOCUMENT`` or ``BLOCKS``.

        Raises
        ------
        ValueError
            If ``entry`` is not a known entry production.
        MarkupParseError
            If any part of ``text`` is not matched by the grammar.
        """
        if entry not in ENTRY_RULES:
            msg = f"Unknown entry production '{entry}'; expected one of {ENTRY_RULES}."
            raise ValueError(msg)
        try:
            root = self._grammar[entry].parse(text)
        except ParseError as exc:
            raise MarkupParseError(
                _describe(exc), line=exc.line(), column=exc.column()
            ) from exc
        lowered = _lower(root)
        if len(lowered) != 1:  # pragma: no cover - entry rules are always named
            msg = f"Entry production '{entry}' did not produce a single root node."
            raise RuntimeError(msg)
        return lowered[0]


def _describe(exc: ParseError) -> str:
    """Build a short human-readable description from a parsimonious error."""
    rule = getattr(exc.expr, "name", "") or "markup"
    snippet = exc.text[exc.pos : exc.pos + 20].splitlines()
    found = repr(snippet[0]) if snippet and snippet[0] else "end of line"
    return f"expected {rule}, found {found}"


def _lower(node: Node) -> list[ParseNode]:
    """Convert a parsimonious node into zero or more ink parse nodes."""
    name = node.expr_name
    if not name or name in SILENT_RULES:
        return _lower_children(node)
    kind = RULE_KINDS.get(name, NodeKind.UNKNOWN)
    if kind in LEAF_KINDS:
        return [ParseNode(kind, (), node.text, name)]
    return [ParseNode(kind, tuple(_lower_children(node)), node.text, name)]


def _lower_children(node: Node) -> list[ParseNode]:
    lowered: list[ParseNode] = []
    for child in node.children or ():
        lowered.extend(_lower(child))
    return lowered


__all__ = [
    "ENTRY_RULES",
    "INK_GRAMMAR",
    "RULE_KINDS",
    "SILENT_RULES",
    "MarkupGrammar",
    "MarkupParseError",
]
