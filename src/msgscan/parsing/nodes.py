"""Node helpers over tree-sitter JavaScript/TypeScript trees.

tree-sitter keeps comments in the tree as ``extras`` that may appear between
any two children; every child list handed out here has them filtered out.
"""

from __future__ import annotations

import html
import sys
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from tree_sitter import Node

COMMENT_TYPES = frozenset({"comment", "html_comment"})

STRING_TYPES = frozenset({"string"})
TEMPLATE_TYPES = frozenset({"template_string"})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_LINE_CONTINUATIONS = frozenset({"\n", "\r\n", "\r", "\u2028", "\u2029"})


class Span(NamedTuple):
    """Half-open byte range ``[start, end)``."""

    start: int
    end: int

    def shift(self, offset: int) -> Span:
        return Span(self.start + offset, self.end + offset)


def span_of(node: Node) -> Span:
    return Span(node.start_byte, node.end_byte)


def node_text(node: Node) -> str:
    """Raw source text of a node."""
    return node.text.decode("utf-8") if node.text else ""


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type not in COMMENT_TYPES]


def first_named_child(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type not in COMMENT_TYPES:
            return child
    return None


def child_of_type(node: Node, node_type: str) -> Node | None:
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def unwrap_parens(node: Node) -> Node:
    """Strip any number of enclosing parentheses."""
    while node.type == "parenthesized_expression":
        inner = first_named_child(node)
        if inner is None:
            break
        node = inner
    return node


def is_text_literal(node: Node | None) -> bool:
    """String literal or template literal without substitutions."""
    if node is None:
        return False
    if node.type in STRING_TYPES:
        return True
    if node.type in TEMPLATE_TYPES:
        return not any(child.type == "template_substitution" for child in node.children)
    return False


def is_object_literal(node: Node | None) -> bool:
    return node is not None and node.type == "object"


def is_absent_sentinel(node: Node | None) -> bool:
    """``null``, ``undefined`` or the numeric literal ``0``."""
    if node is None:
        return False
    if node.type in ("null", "undefined"):
        return True
    if node.type == "identifier":
        return node_text(node) == "undefined"
    if node.type == "number":
        return node_text(node) == "0"
    return False


def is_addition(node: Node) -> bool:
    if node.type != "binary_expression":
        return False
    operator = node.child_by_field_name("operator")
    return operator is not None and operator.type == "+"


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if not body:
        return ""
    if body in _LINE_CONTINUATIONS:
        return ""
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body[0] == "x" and len(body) == 3:
        return chr(int(body[1:], 16))
    if body.startswith("u{"):
        code_point = int(body[2:-1], 16)
        # Out of range: not a code point, kept as written.
        if code_point > sys.maxunicode:
            return sequence
        return chr(code_point)
    if body[0] == "u" and len(body) == 5:
        return chr(int(body[1:], 16))
    if body[0] in "01234567" and body.isdigit():
        return chr(int(body, 8))
    return body


def _join_surrogates(text: str) -> str:
    if any("\ud800" <= ch <= "\udfff" for ch in text):
        return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return text


def literal_value(node: Node) -> str:
    """Cooked value of a string or substitution-free template literal.

    Source text between the delimiters is copied verbatim except for escape
    sequences, which are decoded the way a JavaScript engine would.
    """
    raw = node.text or b""
    base = node.start_byte
    cursor = base + 1
    end = node.end_byte - 1
    parts: list[str] = []
    for child in node.children:
        if child.type == "escape_sequence":
            parts.append(raw[cursor - base : child.start_byte - base].decode("utf-8"))
            parts.append(_decode_escape(node_text(child)))
            cursor = child.end_byte
        elif child.type == "html_character_reference":
            parts.append(raw[cursor - base : child.start_byte - base].decode("utf-8"))
            parts.append(html.unescape(node_text(child)))
            cursor = child.end_byte
    parts.append(raw[cursor - base : end - base].decode("utf-8"))
    value = _join_surrogates("".join(parts))
    if node.type in TEMPLATE_TYPES:
        value = value.replace("\r\n", "\n").replace("\r", "\n")
    return value


def leaf_text(node: Node) -> str:
    """Text used for name comparisons: cooked for string literals, raw otherwise."""
    if is_text_literal(node):
        return literal_value(node)
    return node_text(node)


def callee_name(node: Node) -> str | None:
    """Dotted name of a callee (``t``, ``i18n.gettext``, ``this.t``).

    Computed member access and call chains have no static name.
    """
    parts: list[str] = []
    current = unwrap_parens(node)
    while current.type == "member_expression":
        prop = current.child_by_field_name("property")
        obj = current.child_by_field_name("object")
        if prop is None or obj is None:
            return None
        if prop.type not in ("property_identifier", "private_property_identifier"):
            return None
        parts.append(node_text(prop))
        current = unwrap_parens(obj)
    if current.type not in ("identifier", "this", "super"):
        return None
    parts.append(node_text(current))
    return ".".join(reversed(parts))


def call_arguments(node: Node) -> list[Node] | None:
    """Arguments of a call expression; None for tagged templates."""
    args = node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return None
    return named_children(args)
