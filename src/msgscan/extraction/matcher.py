"""Structural pattern matching with selective span capture.

``match`` is an all-or-nothing equality test between a node and a pattern.
Constraints are checked in layout order and the first failure ends the match;
there is no backtracking. Recursion follows the pattern, never the tree, so its
depth is bounded by how deeply the pattern itself is nested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from msgscan.core.errors import ConfigurationError
from msgscan.extraction.patterns import Pattern, Shape
from msgscan.parsing.nodes import Span, leaf_text, span_of

if TYPE_CHECKING:
    from tree_sitter import Node

MatchResult = tuple[Span, ...] | None


def match(node: Node, pattern: Pattern, *, file_name: str | None = None) -> MatchResult:
    """Match ``node`` against ``pattern``.

    Returns:
        None when the node does not have the pattern's shape, otherwise the
        captured spans in constraint order.

    Raises:
        ConfigurationError: The match succeeded but produced a different number
            of spans than the pattern declares, e.g. a list sub-pattern that
            fits several elements.
    """
    captures = _match(node, pattern)
    if captures is None:
        return None
    expected = pattern.capture_count
    if len(captures) != expected:
        raise ConfigurationError.capture_count_mismatch(
            pattern.kind, expected, len(captures), file_name
        )
    return tuple(captures)


def _match(node: Node, pattern: Pattern) -> list[Span] | None:
    if node.type != pattern.kind:
        return None

    captures: list[Span] = []
    for shape, slot, expected in pattern.constraints():
        if shape is Shape.NAME:
            child = slot.child(node)
            if child is None or leaf_text(child) != expected:
                return None
        elif shape is Shape.NODE:
            child = slot.child(node)
            if child is None:
                return None
            found = _match(child, expected)
            if found is None:
                return None
            captures.extend(found)
        else:
            elements = slot.elements(node)
            for sub_pattern in expected:
                hits = [
                    found
                    for element in elements
                    if (found := _match(element, sub_pattern)) is not None
                ]
                if not hits:
                    return None
                for found in hits:
                    captures.extend(found)

    if pattern.capture:
        captures.append(span_of(node))
    return captures
