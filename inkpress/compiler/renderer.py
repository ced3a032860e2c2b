"""Recursive HTML rendering of ink parse trees."""

from __future__ import annotations

import logging
import typing as typ

from inkpress._constants import RAW_DELIMITER_WIDTH
from inkpress.tree import NodeKind, ParseNode

from .tags import TagTable, Wrapper

logger = logging.getLogger(__name__)


class MarkupCompiler:
    """Compile parse nodes into HTML strings.

    Container nodes concatenate the compiled form of their children and wrap
    the result using the configured :class:`TagTable`. Raw blocks are emitted
    verbatim with their delimiters removed, and literal text is never escaped.
    """

    def __init__(self, tags: TagTable | None = None) -> None:
        self.tags = tags or TagTable()

    def compile(self, node: ParseNode) -> str:  # noqa: PLR0911 - one branch per kind
        """Return the HTML for ``node`` and all of its descendants.

        Parameters
        ----------
        node : ParseNode
            Any node of an ink parse tree.

        Returns
        -------
        str
            Rendered HTML. Metadata nodes and unknown nodes render as an empty
            string rather than raising, so new grammar rules cannot break a
            build.
        """
        match node.kind:
            case NodeKind.DOCUMENT | NodeKind.BLOCKS | NodeKind.ARTICLE:
                return self._children(node)
            case NodeKind.HEADING:
                return self._wrap(self.tags.heading, node)
            case NodeKind.TEXT_BLOCK:
                return self._wrap(self.tags.text_block, node)
            case NodeKind.BOLD:
                return self._wrap(self.tags.bold, node)
            case NodeKind.ITALIC:
                return self._wrap(self.tags.italic, node)
            case NodeKind.SIDENOTE:
                return self._wrap(self.tags.sidenote, node)
            case NodeKind.CODE_BLOCK:
                return self._wrap(self.tags.code_block, node)
            case NodeKind.RAW_BLOCK:
                return strip_raw_delimiters(node.text)
            case NodeKind.LINK:
                return self._link(node)
            case NodeKind.CHAR | NodeKind.LINK_NAME | NodeKind.LINK_URL:
                return node.text
            case NodeKind.EOI:
                return ""
            case (
                NodeKind.METADATA
                | NodeKind.PROPERTY
                | NodeKind.KEY
                | NodeKind.VALUE
                | NodeKind.UNKNOWN
            ):
                # Skipped on purpose: metadata is read separately and unknown
                # rules must not abort a build.
                logger.debug(
                    "Skipping %s node from rule '%s'", node.kind.value, node.rule
                )
                return ""
            case _:  # pragma: no cover - exhaustiveness guard
                typ.assert_never(node.kind)

    def _children(self, node: ParseNode) -> str:
        return "".join(self.compile(child) for child in node.children)

    def _wrap(self, wrapper: Wrapper | None, node: ParseNode) -> str:
        inner = self._children(node)
        if wrapper is None:
            return inner
        return wrapper.wrap(inner)

    def _link(self, node: ParseNode) -> str:
        name, url = node.children
        return f'<a href="{self.compile(url)}">{self.compile(name)}</a>'


def strip_raw_delimiters(text: str, width: int = RAW_DELIMITER_WIDTH) -> str:
    """Remove ``width`` characters from both ends of a raw block.

    Examples
    --------
    >>> strip_raw_delimiters("++++<br>++++")
    '<br>'
    >>> strip_raw_delimiters("+++")
    ''
    """
    if len(text) <= 2 * width:
        return ""
    return text[width : len(text) - width]


__all__ = ["MarkupCompiler", "strip_raw_delimiters"]
