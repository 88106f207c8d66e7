"""Tree-sitter parsing for message extraction."""

from msgscan.parsing.nodes import Span
from msgscan.parsing.treesitter import ParseResult, TreeSitterParser

__all__ = [
    "ParseResult",
    "Span",
    "TreeSitterParser",
]
