"""Tests for parsing/nodes.py and the tree-sitter parser.

Covers:
- Language detection from file extension
- Cooked string literal values (escapes, templates)
- Callee names
- Absence sentinels
"""

from __future__ import annotations

import pytest

from msgscan.core.errors import UnsupportedSourceError
from msgscan.parsing.nodes import (
    Span,
    call_arguments,
    callee_name,
    is_absent_sentinel,
    is_text_literal,
    literal_value,
    named_children,
    span_of,
)
from msgscan.parsing.packs import LanguagePack
from msgscan.parsing.treesitter import TreeSitterParser


def _first(root, node_type: str):
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.children))
    raise AssertionError(f"no {node_type} node")


class TestParser:
    """TreeSitterParser behaviour."""

    def test_parse_javascript(self, parser: TreeSitterParser) -> None:
        result = parser.parse("t('Hello');", "javascript")

        assert result.language == "javascript"
        assert result.error_count == 0
        assert result.root_node.type == "program"
        assert result.source == b"t('Hello');"

    def test_parse_typescript(self, parser: TreeSitterParser) -> None:
        result = parser.parse("const x: string = t('Hello');", "typescript")

        assert result.language == "typescript"
        assert result.error_count == 0

    def test_syntax_errors_are_counted(self, parser: TreeSitterParser) -> None:
        result = parser.parse("t('Hello'", "javascript")

        assert result.error_count > 0

    def test_unknown_language_raises(self, parser: TreeSitterParser) -> None:
        with pytest.raises(UnsupportedSourceError):
            parser.parse("x", "cobol")

    def test_missing_grammar_names_package(self) -> None:
        pack = LanguagePack(
            name="flow",
            grammar_package="tree-sitter-flow",
            grammar_module="msgscan_no_such_grammar",
        )

        with pytest.raises(UnsupportedSourceError) as exc_info:
            TreeSitterParser()._get_language(pack)

        assert exc_info.value.details["package"] == "tree-sitter-flow"
        assert "install tree-sitter-flow" in exc_info.value.message

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("src/app.js", "javascript"),
            ("src/app.mjs", "javascript"),
            ("src/app.jsx", "javascript"),
            ("src/app.ts", "typescript"),
            ("src/App.tsx", "tsx"),
            ("src/App.svelte", None),
            ("README.md", None),
        ],
    )
    def test_detect_language(self, path: str, expected: str | None) -> None:
        assert TreeSitterParser.detect_language(path) == expected


class TestLiteralValue:
    """Cooked values of string literals."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("'plain'", "plain"),
            ('"double"', "double"),
            (r"'it\'s'", "it's"),
            (r"'a\nb'", "a\nb"),
            (r"'\x41B\u{43}'", "ABC"),
            ("'line\\\ncontinued'", "linecontinued"),
            ("`template`", "template"),
            ("`multi\nline`", "multi\nline"),
            ("'ünïcödé'", "ünïcödé"),
        ],
    )
    def test_cooked_value(self, parse_js, source: str, expected: str) -> None:
        root = parse_js(f"x = {source};")
        literal = _first(root, "string" if not source.startswith("`") else "template_string")

        assert is_text_literal(literal)
        assert literal_value(literal) == expected

    @pytest.mark.parametrize("escape", [r"\u{110000}", r"\u{FFFFFFFF}"])
    def test_out_of_range_code_point_is_kept_as_written(self, parse_js, escape: str) -> None:
        literal = _first(parse_js(f"x = 'a{escape}b';"), "string")

        assert literal_value(literal) == f"a{escape}b"

    def test_template_with_substitution_is_not_text(self, parse_js) -> None:
        literal = _first(parse_js("x = `a${b}`;"), "template_string")

        assert not is_text_literal(literal)


class TestCallHelpers:
    """Callee names and call arguments."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("t('a')", "t"),
            ("i18n.gettext('a')", "i18n.gettext"),
            ("this.t('a')", "this.t"),
            ("(t)('a')", "t"),
            ("a.b.c('a')", "a.b.c"),
            ("a['b']('a')", None),
            ("f()('a')", None),
        ],
    )
    def test_callee_name(self, parse_js, source: str, expected: str | None) -> None:
        call = _first(parse_js(source), "call_expression")

        assert callee_name(call.child_by_field_name("function")) == expected

    def test_call_arguments_skip_comments(self, parse_js) -> None:
        call = _first(parse_js("t('a', /* note */ 'b')"), "call_expression")

        args = call_arguments(call)

        assert args is not None
        assert [arg.type for arg in args] == ["string", "string"]

    def test_tagged_template_has_no_arguments(self, parse_js) -> None:
        call = _first(parse_js("t`a`"), "call_expression")

        assert call_arguments(call) is None

    def test_named_children_exclude_comments(self, parse_js) -> None:
        obj = _first(parse_js("x = {a: 'b', // note\n c: 'd'};"), "object")

        assert [child.type for child in named_children(obj)] == ["pair", "pair"]


class TestSentinels:
    """Absence sentinels."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("null", True),
            ("undefined", True),
            ("0", True),
            ("1", False),
            ("false", False),
            ("foo", False),
        ],
    )
    def test_is_absent_sentinel(self, call_args, source: str, expected: bool) -> None:
        (arg,) = call_args(f"t({source})")

        assert is_absent_sentinel(arg) is expected


class TestSpan:
    def test_span_of_uses_byte_offsets(self, parse_js) -> None:
        root = parse_js("x = 'é'; y = 'a';")
        first = _first(root.children[0], "string")
        second = _first(root.children[1], "string")

        assert span_of(first) == Span(4, 8)
        assert span_of(second) == Span(14, 17)

    def test_shift(self) -> None:
        assert Span(1, 4).shift(10) == Span(11, 14)
