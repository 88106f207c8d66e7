"""Argument classification and string literal folding."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from msgscan.parsing.nodes import (
    Span,
    is_absent_sentinel,
    is_addition,
    is_object_literal,
    is_text_literal,
    literal_value,
    span_of,
    unwrap_parens,
)

if TYPE_CHECKING:
    from tree_sitter import Node


class ArgumentKind(StrEnum):
    TEXT = "text"  # string/template literal, possibly folded
    OBJECT = "object"  # object literal
    ABSENT = "absent"  # null, undefined or 0
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Argument:
    """One call argument after folding."""

    kind: ArgumentKind
    span: Span
    node: Node
    text: str | None = None


def fold_literal(node: Node) -> str | None:
    """Concatenated text of a ``+`` chain of text literals.

    Parentheses anywhere in the chain are transparent; any other operand
    aborts folding. Returns None when ``node`` is not such a chain.
    """
    parts: list[str] = []
    stack = [node]
    while stack:
        current = unwrap_parens(stack.pop())
        if is_text_literal(current):
            parts.append(literal_value(current))
            continue
        if is_addition(current):
            left = current.child_by_field_name("left")
            right = current.child_by_field_name("right")
            if left is None or right is None:
                return None
            stack.append(right)
            stack.append(left)
            continue
        return None
    return "".join(parts)


def classify_argument(node: Node) -> Argument:
    """Fold and classify one argument node; the span stays that of ``node``."""
    span = span_of(node)
    text = fold_literal(node)
    if text is not None:
        return Argument(ArgumentKind.TEXT, span, node, text)
    inner = unwrap_parens(node)
    if is_object_literal(inner):
        return Argument(ArgumentKind.OBJECT, span, inner)
    if is_absent_sentinel(inner):
        return Argument(ArgumentKind.ABSENT, span, inner)
    return Argument(ArgumentKind.OTHER, span, node)


@dataclass(frozen=True, slots=True)
class ContentOptions:
    """Normalisation applied to extracted text.

    Attributes:
        trim_whitespace: Drop leading newlines and trailing whitespace.
        preserve_indentation: Keep leading spaces/tabs of every line.
        replace_new_lines: Replacement string for newlines, None keeps them.
    """

    trim_whitespace: bool = False
    preserve_indentation: bool = True
    replace_new_lines: str | None = None

    def normalize(self, content: str) -> str:
        if self.trim_whitespace:
            content = re.sub(r"^\n+|\s+$", "", content)
        if not self.preserve_indentation:
            content = re.sub(r"^[ \t]+", "", content, flags=re.MULTILINE)
        if self.replace_new_lines is not None:
            content = content.replace("\n", self.replace_new_lines)
        return content
