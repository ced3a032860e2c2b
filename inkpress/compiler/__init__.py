"""Utilities for compiling ink parse trees and documents into HTML."""

from .document import CompiledDocument, DocumentCompiler
from .renderer import MarkupCompiler, strip_raw_delimiters
from .tags import TagTable, Wrapper

__all__ = [
    "CompiledDocument",
    "DocumentCompiler",
    "MarkupCompiler",
    "TagTable",
    "Wrapper",
    "strip_raw_delimiters",
]
