"""Grammar packs for the script languages msgscan reads.

Each pack names the tree-sitter grammar distribution, its import module and
the file extensions it owns. Component files (``.svelte``, ``.vue``, ``.html``)
are not owned by a grammar: their script sections reach the parser as
fragments produced by a splitter.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LanguagePack:
    """tree-sitter configuration for a single script language."""

    name: str  # Canonical language name ("javascript", "typescript", "tsx")
    grammar_package: str  # PyPI package ("tree-sitter-javascript")
    grammar_module: str  # Python import ("tree_sitter_javascript")
    # Non-standard function name (e.g. "language_typescript", "language_tsx")
    language_func: str = "language"
    extensions: frozenset[str] = field(default_factory=frozenset)


JAVASCRIPT_PACK = LanguagePack(
    name="javascript",
    grammar_package="tree-sitter-javascript",
    grammar_module="tree_sitter_javascript",
    extensions=frozenset({"js", "jsx", "mjs", "cjs"}),
)

TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
)

TSX_PACK = LanguagePack(
    name="tsx",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_tsx",
    extensions=frozenset({"tsx"}),
)

_ALL_PACKS: tuple[LanguagePack, ...] = (JAVASCRIPT_PACK, TYPESCRIPT_PACK, TSX_PACK)

# name -> Pack
PACKS: dict[str, LanguagePack] = {pack.name: pack for pack in _ALL_PACKS}
PACKS["js"] = JAVASCRIPT_PACK
PACKS["ts"] = TYPESCRIPT_PACK

# Extension -> Pack
_EXT_TO_PACK: dict[str, LanguagePack] = {}
for _pack in _ALL_PACKS:
    for _ext in _pack.extensions:
        _EXT_TO_PACK[_ext] = _pack

# Markup files whose script sections are handed over as fragments
COMPONENT_EXTENSIONS: frozenset[str] = frozenset({"svelte", "vue", "html", "htm"})


def get_pack(name: str) -> LanguagePack | None:
    """Get a LanguagePack by language name."""
    return PACKS.get(name)


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Get a LanguagePack for a file extension (without leading dot)."""
    return _EXT_TO_PACK.get(ext.lower())


def is_component_ext(ext: str) -> bool:
    return ext.lower() in COMPONENT_EXTENSIONS
