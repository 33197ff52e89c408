"""Markup rewriting: follows local imports and replaces package references."""

from .markup import MarkupDocument
from .pipeline import RewriteResult, process_directory, process_file, rewrite

__all__ = [
    "MarkupDocument",
    "RewriteResult",
    "process_directory",
    "process_file",
    "rewrite",
]
