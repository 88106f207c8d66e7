"""Declarative shape descriptors for definition sites.

A pattern describes the node kind it expects and, per kind, which child
constraints are legal. Each variant class binds one tree-sitter node type and
declares its layout: name-equality constraints, nested sub-patterns and list
sub-patterns (matched against every element of a child list). Passing a field
that the kind does not declare fails at construction, not at match time.

Example - capture the arrow function bound to ``t``::

    VariableDeclarator(name="t", value=ArrowFunction(capture=True))

Patterns are immutable and meant to be built once per rule and reused across
every walk.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from msgscan.core.errors import ConfigurationError
from msgscan.parsing.nodes import child_of_type, first_named_child, named_children

if TYPE_CHECKING:
    from tree_sitter import Node


class Shape(StrEnum):
    """How a pattern field constrains its child."""

    NAME = "name"  # leaf text equality
    NODE = "node"  # nested sub-pattern
    LIST = "list"  # per-element sub-patterns


@dataclass(frozen=True, slots=True)
class Slot:
    """Where a pattern field lives on a node.

    ``field`` selects a tree-sitter field, ``node_type`` the first named child
    of that type; with neither, single fields resolve to the first named child
    and list fields to the node's own children.
    """

    field: str | None = None
    node_type: str | None = None

    def child(self, node: Node) -> Node | None:
        if self.field is not None:
            return node.child_by_field_name(self.field)
        if self.node_type is not None:
            return child_of_type(node, self.node_type)
        return first_named_child(node)

    def elements(self, node: Node) -> list[Node]:
        container = node.child_by_field_name(self.field) if self.field is not None else node
        if container is None:
            return []
        children = named_children(container)
        if self.node_type is not None:
            children = [child for child in children if child.type == self.node_type]
        return children


@dataclass(frozen=True, slots=True, kw_only=True)
class Pattern:
    """Base of all pattern variants."""

    kind: ClassVar[str] = ""
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = ()

    capture: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.capture, bool):
            raise ConfigurationError.invalid_pattern(
                "capture must be a boolean", kind=self.kind, value=str(self.capture)
            )
        for attr, shape, _slot in self.layout:
            value = getattr(self, attr)
            if value is None:
                continue
            if shape is Shape.NAME and not isinstance(value, str):
                raise ConfigurationError.invalid_pattern(
                    f"{self.kind}.{attr} must be a string", kind=self.kind, field=attr
                )
            if shape is Shape.NODE and not isinstance(value, Pattern):
                raise ConfigurationError.invalid_pattern(
                    f"{self.kind}.{attr} must be a pattern", kind=self.kind, field=attr
                )
            if shape is Shape.LIST:
                items = tuple(value)
                if not all(isinstance(item, Pattern) for item in items):
                    raise ConfigurationError.invalid_pattern(
                        f"{self.kind}.{attr} must be a list of patterns",
                        kind=self.kind,
                        field=attr,
                    )
                object.__setattr__(self, attr, items)

    def constraints(self) -> Iterator[tuple[Shape, Slot, Any]]:
        """Declared constraints in layout order, unset fields skipped."""
        for attr, shape, slot in self.layout:
            value = getattr(self, attr)
            if value is not None:
                yield shape, slot, value

    @property
    def capture_count(self) -> int:
        """Number of spans a successful match yields."""
        count = 1 if self.capture else 0
        for shape, _slot, value in self.constraints():
            if shape is Shape.NODE:
                count += value.capture_count
            elif shape is Shape.LIST:
                count += sum(item.capture_count for item in value)
        return count


# =============================================================================
# Objects and declarations
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class ObjectLiteral(Pattern):
    kind: ClassVar[str] = "object"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("properties", Shape.LIST, Slot()),
    )

    properties: tuple[Pattern, ...] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Pair(Pattern):
    """``key: value`` inside an object literal."""

    kind: ClassVar[str] = "pair"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("key", Shape.NAME, Slot(field="key")),
        ("value", Shape.NODE, Slot(field="value")),
    )

    key: str | None = None
    value: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class VariableDeclarator(Pattern):
    kind: ClassVar[str] = "variable_declarator"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
        ("value", Shape.NODE, Slot(field="value")),
    )

    name: str | None = None
    value: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class LexicalDeclaration(Pattern):
    """``const``/``let`` declaration holding one or more declarators."""

    kind: ClassVar[str] = "lexical_declaration"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("declarators", Shape.LIST, Slot(node_type="variable_declarator")),
    )

    declarators: tuple[Pattern, ...] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class VariableDeclaration(Pattern):
    """``var`` declaration."""

    kind: ClassVar[str] = "variable_declaration"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("declarators", Shape.LIST, Slot(node_type="variable_declarator")),
    )

    declarators: tuple[Pattern, ...] | None = None


# =============================================================================
# Functions and classes
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class FunctionDeclaration(Pattern):
    kind: ClassVar[str] = "function_declaration"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
    )

    name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class FunctionExpression(Pattern):
    kind: ClassVar[str] = "function_expression"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
    )

    name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ArrowFunction(Pattern):
    kind: ClassVar[str] = "arrow_function"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("body", Shape.NODE, Slot(field="body")),
    )

    body: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class MethodDefinition(Pattern):
    kind: ClassVar[str] = "method_definition"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
    )

    name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDefinition(Pattern):
    """Class field (JavaScript grammar)."""

    kind: ClassVar[str] = "field_definition"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="property")),
        ("value", Shape.NODE, Slot(field="value")),
    )

    name: str | None = None
    value: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PublicFieldDefinition(Pattern):
    """Class field (TypeScript grammar)."""

    kind: ClassVar[str] = "public_field_definition"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
        ("value", Shape.NODE, Slot(field="value")),
    )

    name: str | None = None
    value: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ClassDeclaration(Pattern):
    kind: ClassVar[str] = "class_declaration"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
        ("members", Shape.LIST, Slot(field="body")),
    )

    name: str | None = None
    members: tuple[Pattern, ...] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ClassExpression(Pattern):
    kind: ClassVar[str] = "class"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
        ("members", Shape.LIST, Slot(field="body")),
    )

    name: str | None = None
    members: tuple[Pattern, ...] | None = None


# =============================================================================
# Statements
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class ExpressionStatement(Pattern):
    kind: ClassVar[str] = "expression_statement"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("expression", Shape.NODE, Slot()),
    )

    expression: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AssignmentExpression(Pattern):
    """``left = right``; ``left`` compares against the raw target text."""

    kind: ClassVar[str] = "assignment_expression"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("left", Shape.NAME, Slot(field="left")),
        ("right", Shape.NODE, Slot(field="right")),
    )

    left: str | None = None
    right: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class LabeledStatement(Pattern):
    """``label: body``, e.g. reactive ``$:`` statements in components."""

    kind: ClassVar[str] = "labeled_statement"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("label", Shape.NAME, Slot(field="label")),
        ("body", Shape.NODE, Slot(field="body")),
    )

    label: str | None = None
    body: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExportStatement(Pattern):
    kind: ClassVar[str] = "export_statement"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("declaration", Shape.NODE, Slot(field="declaration")),
    )

    declaration: Pattern | None = None


# =============================================================================
# Imports
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportStatement(Pattern):
    """``import clause from 'source'``; ``source`` compares the cooked string."""

    kind: ClassVar[str] = "import_statement"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("source", Shape.NAME, Slot(field="source")),
        ("clause", Shape.NODE, Slot(node_type="import_clause")),
    )

    source: str | None = None
    clause: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportClause(Pattern):
    kind: ClassVar[str] = "import_clause"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("default", Shape.NAME, Slot(node_type="identifier")),
        ("named", Shape.NODE, Slot(node_type="named_imports")),
    )

    default: str | None = None
    named: Pattern | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NamedImports(Pattern):
    kind: ClassVar[str] = "named_imports"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("specifiers", Shape.LIST, Slot(node_type="import_specifier")),
    )

    specifiers: tuple[Pattern, ...] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportSpecifier(Pattern):
    kind: ClassVar[str] = "import_specifier"
    layout: ClassVar[tuple[tuple[str, Shape, Slot], ...]] = (
        ("name", Shape.NAME, Slot(field="name")),
        ("alias", Shape.NAME, Slot(field="alias")),
    )

    name: str | None = None
    alias: str | None = None


PATTERN_KINDS: dict[str, type[Pattern]] = {
    cls.kind: cls
    for cls in (
        ObjectLiteral,
        Pair,
        VariableDeclarator,
        LexicalDeclaration,
        VariableDeclaration,
        FunctionDeclaration,
        FunctionExpression,
        ArrowFunction,
        MethodDefinition,
        FieldDefinition,
        PublicFieldDefinition,
        ClassDeclaration,
        ClassExpression,
        ExpressionStatement,
        AssignmentExpression,
        LabeledStatement,
        ExportStatement,
        ImportStatement,
        ImportClause,
        NamedImports,
        ImportSpecifier,
    )
}


def pattern_from_dict(data: Mapping[str, Any]) -> Pattern:
    """Build a pattern from its mapping form (as written in config files).

    ``{"kind": "variable_declarator", "name": "t",
    "value": {"kind": "arrow_function", "capture": true}}``
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError.invalid_pattern("pattern must be a mapping", value=str(data))
    kind = data.get("kind")
    cls = PATTERN_KINDS.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise ConfigurationError.invalid_pattern(f"unknown pattern kind: {kind!r}", kind=str(kind))

    shapes = {attr: shape for attr, shape, _slot in cls.layout}
    allowed = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "kind":
            continue
        if key not in allowed:
            raise ConfigurationError.invalid_pattern(
                f"'{key}' is not a field of {kind}", kind=kind, field=key
            )
        shape = shapes.get(key)
        if shape is Shape.NODE and value is not None:
            value = pattern_from_dict(value)
        elif shape is Shape.LIST and value is not None:
            if not isinstance(value, list | tuple):
                raise ConfigurationError.invalid_pattern(
                    f"{kind}.{key} must be a list", kind=kind, field=key
                )
            value = tuple(pattern_from_dict(item) for item in value)
        kwargs[key] = value
    return cls(**kwargs)
