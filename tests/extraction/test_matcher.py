"""Tests for the structural pattern matcher and pattern construction."""

from __future__ import annotations

import itertools

import pytest

from msgscan.core.errors import ConfigurationError, ErrorCode
from msgscan.extraction.matcher import match
from msgscan.extraction.patterns import (
    ArrowFunction,
    ClassDeclaration,
    ExportStatement,
    FunctionDeclaration,
    ImportClause,
    ImportSpecifier,
    ImportStatement,
    LexicalDeclaration,
    MethodDefinition,
    NamedImports,
    ObjectLiteral,
    Pair,
    VariableDeclarator,
    pattern_from_dict,
)
from msgscan.parsing.nodes import Span


def _find(root, node_type: str):
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.children))
    raise AssertionError(f"no {node_type} node")


def _text(source: str, span: Span) -> str:
    return source.encode()[span.start : span.end].decode()


class TestMatchBasics:
    """Kind checks, name equality and nesting."""

    def test_kind_mismatch_returns_none(self, parse_js) -> None:
        node = _find(parse_js("function t() {}"), "function_declaration")

        assert match(node, VariableDeclarator(name="t")) is None

    def test_name_mismatch_returns_none(self, parse_js) -> None:
        node = _find(parse_js("function t() {}"), "function_declaration")

        assert match(node, FunctionDeclaration(name="u")) is None

    def test_match_without_captures_returns_empty_tuple(self, parse_js) -> None:
        node = _find(parse_js("function t() {}"), "function_declaration")

        assert match(node, FunctionDeclaration(name="t")) == ()

    def test_capture_marker_yields_node_span(self, parse_js) -> None:
        source = "const t = (s) => s;"
        node = _find(parse_js(source), "variable_declarator")

        result = match(node, VariableDeclarator(name="t", value=ArrowFunction(capture=True)))

        assert result is not None
        assert [_text(source, span) for span in result] == ["(s) => s"]

    def test_missing_child_fails(self, parse_js) -> None:
        node = _find(parse_js("let t;"), "variable_declarator")

        assert match(node, VariableDeclarator(name="t", value=ArrowFunction())) is None

    def test_string_key_compares_cooked_value(self, parse_js) -> None:
        source = "x = {'my-key': 'v'};"
        node = _find(parse_js(source), "pair")

        assert match(node, Pair(key="my-key", capture=True)) is not None

    def test_export_wraps_declaration(self, parse_js) -> None:
        source = "export function translate() {}"
        node = _find(parse_js(source), "export_statement")

        result = match(
            node, ExportStatement(declaration=FunctionDeclaration(name="translate", capture=True))
        )

        assert result is not None
        assert _text(source, result[0]) == "function translate() {}"


class TestListConstraints:
    """List sub-patterns are matched against every element."""

    def test_sub_pattern_matching_no_element_fails(self, parse_js) -> None:
        node = _find(parse_js("x = {a: 1, b: 2};"), "object")

        assert match(node, ObjectLiteral(properties=[Pair(key="c")])) is None

    def test_sub_patterns_capture_in_order(self, parse_js) -> None:
        source = "x = {a: 1, b: 2, c: 3};"
        node = _find(parse_js(source), "object")

        result = match(
            node,
            ObjectLiteral(properties=[Pair(key="c", capture=True), Pair(key="a", capture=True)]),
        )

        assert result is not None
        assert [_text(source, span) for span in result] == ["c: 3", "a: 1"]

    def test_several_hits_for_one_sub_pattern_raise(self, parse_js) -> None:
        node = _find(parse_js("x = {a: 1, a: 2};"), "object")

        with pytest.raises(ConfigurationError) as exc_info:
            match(node, ObjectLiteral(properties=[Pair(key="a", capture=True)]), file_name="x.js")

        assert exc_info.value.code is ErrorCode.CAPTURE_COUNT_MISMATCH
        assert exc_info.value.details["file"] == "x.js"

    def test_class_members(self, parse_js) -> None:
        source = "class I18n { t(s) { return s; } other() {} }"
        node = _find(parse_js(source), "class_declaration")

        result = match(
            node,
            ClassDeclaration(name="I18n", members=[MethodDefinition(name="t", capture=True)]),
        )

        assert result is not None
        assert _text(source, result[0]) == "t(s) { return s; }"

    def test_named_import(self, parse_js) -> None:
        source = "import { t as tr, n } from 'i18n';"
        node = _find(parse_js(source), "import_statement")
        pattern = ImportStatement(
            source="i18n",
            clause=ImportClause(
                named=NamedImports(specifiers=[ImportSpecifier(name="t", capture=True)])
            ),
        )

        result = match(node, pattern)

        assert result is not None
        assert _text(source, result[0]) == "t as tr"

    def test_import_from_other_module_does_not_match(self, parse_js) -> None:
        node = _find(parse_js("import { t } from 'other';"), "import_statement")

        assert match(node, ImportStatement(source="i18n")) is None


class TestCaptureCounts:
    """k declared captures yield exactly k spans."""

    @pytest.mark.parametrize(
        "flags", list(itertools.product([False, True], repeat=4)), ids=lambda f: "".join(
            "1" if flag else "0" for flag in f
        )
    )
    def test_every_capture_permutation(self, parse_js, flags: tuple[bool, ...]) -> None:
        source = "const t = () => 'x', n = 1;"
        node = _find(parse_js(source), "lexical_declaration")
        outer, declarator, arrow, other = flags
        pattern = LexicalDeclaration(
            capture=outer,
            declarators=[
                VariableDeclarator(name="t", capture=declarator, value=ArrowFunction(capture=arrow)),
                VariableDeclarator(name="n", capture=other),
            ],
        )

        result = match(node, pattern)

        assert pattern.capture_count == sum(flags)
        assert result is not None
        assert len(result) == sum(flags)
        expected = [
            text
            for text, flag in (
                ("() => 'x'", arrow),
                ("t = () => 'x'", declarator),
                ("n = 1", other),
                (source, outer),
            )
            if flag
        ]
        assert [_text(source, span) for span in result] == expected


class TestPatternConstruction:
    """Pattern fields are checked at construction."""

    def test_unknown_field_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            FunctionDeclaration(value=ArrowFunction())  # type: ignore[call-arg]

    def test_wrong_field_type(self) -> None:
        with pytest.raises(ConfigurationError):
            VariableDeclarator(name="t", value="arrow")  # type: ignore[arg-type]

    def test_from_dict(self) -> None:
        pattern = pattern_from_dict(
            {
                "kind": "variable_declarator",
                "name": "t",
                "value": {"kind": "arrow_function", "capture": True},
            }
        )

        assert pattern == VariableDeclarator(name="t", value=ArrowFunction(capture=True))
        assert pattern.capture_count == 1

    def test_from_dict_unknown_kind(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            pattern_from_dict({"kind": "while_statement"})

        assert exc_info.value.code is ErrorCode.INVALID_PATTERN

    def test_from_dict_unknown_field(self) -> None:
        with pytest.raises(ConfigurationError):
            pattern_from_dict({"kind": "function_declaration", "value": {"kind": "object"}})

    def test_from_dict_list_field_must_be_list(self) -> None:
        with pytest.raises(ConfigurationError):
            pattern_from_dict({"kind": "object", "properties": {"kind": "pair"}})
