"""Read the key/value metadata block of an ink document.

Example
-------
>>> from inkpress.grammar import MarkupGrammar
>>> from inkpress.metadata import document_metadata
>>> root = MarkupGrammar().parse("---\\ntemplate: post.html\\n---\\nBody\\n")
>>> document_metadata(root)
{'template': 'post.html'}
"""

from __future__ import annotations

from .tree import NodeKind, ParseNode


def extract_metadata(node: ParseNode) -> dict[str, str]:
    """Fold the properties of a metadata node into a mapping.

    Parameters
    ----------
    node : ParseNode
        A ``METADATA`` node whose children are ``PROPERTY`` nodes, each holding
        a ``KEY`` and a ``VALUE`` leaf.

    Returns
    -------
    dict[str, str]
        Keys and values exactly as written. Properties are applied in document
        order, so a repeated key keeps its last value.
    """
    metadata: dict[str, str] = {}
    for prop in node.iter_kind(NodeKind.PROPERTY):
        key, value = prop.children
        metadata[key.text] = value.text
    return metadata


def document_metadata(root: ParseNode) -> dict[str, str]:
    """Return the metadata declared by a document, or an empty mapping."""
    block = root.find(NodeKind.METADATA)
    if block is None:
        return {}
    return extract_metadata(block)


__all__ = ["document_metadata", "extract_metadata"]
