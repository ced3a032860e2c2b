"""Parse-tree nodes produced from ink markup.

The grammar adapter in :mod:`inkpress.grammar` lowers the parser's concrete
syntax tree into :class:`ParseNode` values whose ``kind`` is drawn from the
closed :class:`NodeKind` enumeration. The compiler and the metadata extractor
only ever see these nodes.

Example
-------
>>> from inkpress.tree import NodeKind, ParseNode
>>> word = ParseNode.leaf(NodeKind.CHAR, "hello")
>>> ParseNode(NodeKind.BOLD, (word,)).children[0].text
'hello'
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class NodeKind(enum.Enum):
    """Every node kind the ink grammar can produce."""

    DOCUMENT = "document"
    BLOCKS = "blocks"
    METADATA = "metadata"
    PROPERTY = "property"
    KEY = "key"
    VALUE = "value"
    ARTICLE = "article"
    HEADING = "heading"
    TEXT_BLOCK = "text_block"
    BOLD = "bold"
    ITALIC = "italic"
    SIDENOTE = "sidenote"
    LINK = "link"
    LINK_NAME = "link_name"
    LINK_URL = "link_url"
    CODE_BLOCK = "code_block"
    RAW_BLOCK = "raw_block"
    CHAR = "char"
    EOI = "eoi"
    UNKNOWN = "unknown"


LEAF_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.CHAR,
        NodeKind.LINK_NAME,
        NodeKind.LINK_URL,
        NodeKind.KEY,
        NodeKind.VALUE,
        NodeKind.RAW_BLOCK,
        NodeKind.EOI,
    }
)


@dc.dataclass(frozen=True, slots=True)
class ParseNode:
    """A labelled node of the ink parse tree.

    Attributes
    ----------
    kind : NodeKind
        Node category used by the compiler to pick a rendering rule.
    children : tuple[ParseNode, ...]
        Ordered child nodes; always empty for leaf kinds.
    text : str
        Source text captured by the node, delimiters included.
    rule : str
        Name of the grammar rule that produced the node. Defaults to the
        kind's value for hand-built trees.
    """

    kind: NodeKind
    children: tuple[ParseNode, ...] = ()
    text: str = ""
    rule: str = ""

    def __post_init__(self) -> None:
        if not self.rule:
            object.__setattr__(self, "rule", self.kind.value)

    @classmethod
    def leaf(cls, kind: NodeKind, text: str) -> ParseNode:
        """Return a childless node holding ``text``."""
        return cls(kind, (), text)

    def find(self, kind: NodeKind) -> ParseNode | None:
        """Return the first direct child of ``kind``, if any."""
        return next((child for child in self.children if child.kind is kind), None)

    def iter_kind(self, kind: NodeKind) -> cabc.Iterator[ParseNode]:
        """Yield direct children of ``kind`` in document order."""
        return (child for child in self.children if child.kind is kind)


__all__ = ["LEAF_KINDS", "NodeKind", "ParseNode"]
