"""Compile whole ink sources: parse, read metadata, render the article."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from inkpress.grammar import MarkupGrammar
from inkpress.metadata import document_metadata
from inkpress.tree import NodeKind

from .renderer import MarkupCompiler

if typ.TYPE_CHECKING:
    from .tags import TagTable


@dc.dataclass(frozen=True, slots=True)
class CompiledDocument:
    """Declared metadata and rendered body of one ink document."""

    metadata: dict[str, str]
    html: str


class DocumentCompiler:
    """Drive the grammar, metadata extractor, and markup compiler together."""

    def __init__(
        self,
        *,
        grammar: MarkupGrammar | None = None,
        tags: TagTable | None = None,
    ) -> None:
        """Initialize the pipeline.

        Parameters
        ----------
        grammar : MarkupGrammar, optional
            Parser to use; a default ink grammar is compiled when omitted.
        tags : TagTable, optional
            Wrapper tags for the markup compiler.
        """
        self.grammar = grammar or MarkupGrammar()
        self.renderer = MarkupCompiler(tags)

    def compile_document(self, text: str) -> CompiledDocument:
        """Compile a full document with an optional metadata block.

        Raises
        ------
        MarkupParseError
            If ``text`` does not match the ``document`` production.
        """
        root = self.grammar.parse(text, entry="document")
        metadata = document_metadata(root)
        article = root.find(NodeKind.ARTICLE)
        html = self.renderer.compile(article) if article is not None else ""
        return CompiledDocument(metadata=metadata, html=html)

    def convert(self, text: str) -> str:
        """Compile a bare block sequence, without metadata, into HTML."""
        return self.renderer.compile(self.grammar.parse(text, entry="blocks"))


__all__ = ["CompiledDocument", "DocumentCompiler"]
