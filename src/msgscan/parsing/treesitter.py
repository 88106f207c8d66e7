"""Tree-sitter parsing of script sources.

The parser is the syntax tree provider for extraction: every node it hands
out carries a kind tag (``node.type``), named child fields, the literal text of
leaves and a ``[start_byte, end_byte)`` span.

Usage::

    parser = TreeSitterParser()
    result = parser.parse(b"t('Hello')", "javascript")
    result.root_node.type  # "program"
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from msgscan.core.errors import UnsupportedSourceError
from msgscan.parsing.packs import LanguagePack, get_pack, get_pack_for_ext


@dataclass
class ParseResult:
    """Result of parsing one script unit."""

    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    source: bytes
    error_count: int
    root_node: Any  # Tree-sitter Node


@dataclass
class TreeSitterParser:
    """Tree-sitter parser for JavaScript, TypeScript and TSX.

    Languages are loaded lazily from their grammar packages and cached per
    parser instance.
    """

    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, pack: LanguagePack) -> Any:
        """Get or load the tree-sitter Language for a pack."""
        if pack.name in self._languages:
            return self._languages[pack.name]

        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func)
        except (ImportError, AttributeError) as err:
            raise UnsupportedSourceError.grammar_unavailable(
                pack.name, pack.grammar_package
            ) from err

        lang = tree_sitter.Language(lang_fn())
        self._languages[pack.name] = lang
        return lang

    @staticmethod
    def detect_language(path: Path | str) -> str | None:
        """Language name for a script file, or None for anything else."""
        ext = Path(path).suffix.lower().lstrip(".")
        pack = get_pack_for_ext(ext)
        return pack.name if pack is not None else None

    def parse(self, source: bytes | str, language: str = "javascript") -> ParseResult:
        """Parse source text with the grammar of ``language``.

        Args:
            source: Script text. ``str`` input is encoded as UTF-8, and all
                spans refer to that encoding.
            language: Language name ("javascript", "typescript", "tsx").

        Returns:
            ParseResult with tree, source bytes and error info.
        """
        if isinstance(source, str):
            source = source.encode("utf-8")

        pack = get_pack(language)
        if pack is None:
            raise UnsupportedSourceError.grammar_unavailable(language)

        self._parser.language = self._get_language(pack)
        tree = self._parser.parse(source)

        error_count = 0
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            stack.extend(node.children)

        return ParseResult(
            tree=tree,
            language=pack.name,
            source=source,
            error_count=error_count,
            root_node=tree.root_node,
        )
