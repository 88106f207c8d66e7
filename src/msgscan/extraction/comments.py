"""Structured comment payloads flattened into translator comment lines.

A payload such as::

    {comment: 'Shown on the login page', props: {name: 'user name'}, ui: {max: '20'}}

renders, with ``props`` declared as ``("{", "}")``, to::

    Shown on the login page
    {name}: user name
    ui.max: 20

Lines land in four buckets that are concatenated in a fixed order: plain
(the comment key), other-keyed (top-level keys), prop-braced (entries under a
declared prop key) and deep-keyed (dotted paths). Consumers depend on this
order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from msgscan.core.errors import ConfigurationError, MalformedCommentError
from msgscan.extraction.literals import ArgumentKind, classify_argument
from msgscan.parsing.nodes import leaf_text, named_children

if TYPE_CHECKING:
    from tree_sitter import Node

MAX_COMMENT_DEPTH = 32


@dataclass(frozen=True, slots=True)
class CommentConfig:
    """How structured comment payloads are read.

    Attributes:
        comment_key: Top-level key whose value is rendered verbatim.
        props: Prop keys mapped to the ``(open, close)`` brackets that wrap
            the names of their entries.
        throw_when_malformed: Raise on values that are neither text nor
            object; when False such entries are skipped.
        fallback: Allow optional argument roles to be skipped when their
            argument is missing or of the wrong type.
    """

    comment_key: str = "comment"
    props: Mapping[str, tuple[str, str]] = field(default_factory=dict)
    throw_when_malformed: bool = True
    fallback: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.comment_key, str):
            raise ConfigurationError.invalid_value(
                "comments.comment_key", self.comment_key, "must be a string"
            )
        checked: dict[str, tuple[str, str]] = {}
        for key, brackets in dict(self.props).items():
            if (
                not isinstance(key, str)
                or isinstance(brackets, str)
                or not isinstance(brackets, list | tuple)
                or len(brackets) != 2
                or not all(isinstance(part, str) for part in brackets)
            ):
                raise ConfigurationError.invalid_props(str(key), brackets)
            checked[key] = (brackets[0], brackets[1])
        object.__setattr__(self, "props", checked)


@dataclass(frozen=True, slots=True)
class CommentAccumulator:
    """Rendered comment lines, one tuple per bucket."""

    plain: tuple[str, ...] = ()
    other: tuple[str, ...] = ()
    prop: tuple[str, ...] = ()
    keyed: tuple[str, ...] = ()

    def merge(self, other: CommentAccumulator) -> CommentAccumulator:
        return CommentAccumulator(
            plain=self.plain + other.plain,
            other=self.other + other.other,
            prop=self.prop + other.prop,
            keyed=self.keyed + other.keyed,
        )

    def lines(self) -> list[str]:
        return [*self.plain, *self.other, *self.prop, *self.keyed]


def flatten(
    payload: Node,
    config: CommentConfig,
    *,
    text: str,
    context: str | None = None,
) -> list[str]:
    """Render an object-literal comment payload.

    Args:
        payload: The ``object`` node passed as the comments argument.
        config: Comment configuration.
        text: Text of the message being extracted, for error reports.
        context: Context of the message being extracted, for error reports.

    Raises:
        MalformedCommentError: A value is neither text nor object and
            ``config.throw_when_malformed`` is set, or the payload nests deeper
            than ``MAX_COMMENT_DEPTH``.
    """
    return _fold(payload, None, False, config, text, context, 0).lines()


def _fold(
    payload: Node,
    prefix: str | None,
    in_prop: bool,
    config: CommentConfig,
    text: str,
    context: str | None,
    depth: int,
) -> CommentAccumulator:
    if depth > MAX_COMMENT_DEPTH:
        raise MalformedCommentError.too_deep(prefix or "", MAX_COMMENT_DEPTH)

    acc = CommentAccumulator()
    for entry in named_children(payload):
        # Shorthand properties, spreads and methods carry no comment text
        if entry.type != "pair":
            continue
        key_node = entry.child_by_field_name("key")
        value_node = entry.child_by_field_name("value")
        if key_node is None or value_node is None:
            continue

        key = leaf_text(key_node)
        path = f"{prefix}.{key}" if prefix is not None else key
        value = classify_argument(value_node)

        if value.kind is ArgumentKind.TEXT:
            lines = (value.text or "").split("\n")
            if prefix is None and not in_prop and key == config.comment_key:
                acc = acc.merge(CommentAccumulator(plain=tuple(lines)))
            elif in_prop and prefix is not None and prefix != config.comment_key:
                opening, closing = config.props[prefix]
                acc = acc.merge(
                    CommentAccumulator(prop=tuple(f"{opening}{key}{closing}: {ln}" for ln in lines))
                )
            elif prefix is not None:
                acc = acc.merge(CommentAccumulator(keyed=tuple(f"{path}: {ln}" for ln in lines)))
            else:
                acc = acc.merge(CommentAccumulator(other=tuple(f"{path}: {ln}" for ln in lines)))
        elif value.kind is ArgumentKind.OBJECT:
            if prefix is None and key in config.props:
                acc = acc.merge(_fold(value.node, key, True, config, text, context, depth + 1))
            else:
                acc = acc.merge(_fold(value.node, path, False, config, text, context, depth + 1))
        elif config.throw_when_malformed:
            raise MalformedCommentError.invalid_value(path, text, context)

    return acc
