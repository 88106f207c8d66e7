"""Argument role resolution for translator calls.

Given the arguments of a call such as ``t('Apple', 'Apples', 'fruit')`` and a
role map ``{text: 0, text_plural: 1, context: 2}``, decides which argument
plays which role and builds the extracted message.

Roles are classified in ascending position order. With fallback enabled, a
role whose argument has the wrong type may be skipped: the remaining roles are
then re-tried one argument slot earlier. Which roles may be skipped is decided
by ``fallback_transition``, a pure function over the types of the roles still
unresolved; ``classify_roles`` drives it as a small state machine.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from msgscan.core.errors import ConfigurationError
from msgscan.extraction.comments import CommentConfig, flatten
from msgscan.extraction.literals import Argument, ArgumentKind, ContentOptions, classify_argument
from msgscan.parsing.nodes import Span

if TYPE_CHECKING:
    from tree_sitter import Node


class Role(StrEnum):
    TEXT = "text"
    TEXT_PLURAL = "text_plural"
    CONTEXT = "context"
    COMMENTS = "comments"


class ArgType(StrEnum):
    """Type class of a role, as seen by the fallback rules."""

    REQUIRED = "required"  # text
    STRING = "string"  # text_plural, context
    COMMENT = "comment"  # comments


_ARG_TYPES = {
    Role.TEXT: ArgType.REQUIRED,
    Role.TEXT_PLURAL: ArgType.STRING,
    Role.CONTEXT: ArgType.STRING,
    Role.COMMENTS: ArgType.COMMENT,
}

_TEXT_ONLY = frozenset({ArgumentKind.TEXT})
_TEXT_OR_ABSENT = frozenset({ArgumentKind.TEXT, ArgumentKind.ABSENT})
_ANY_COMMENT = frozenset({ArgumentKind.TEXT, ArgumentKind.OBJECT, ArgumentKind.ABSENT})
_OBJECT_OR_ABSENT = frozenset({ArgumentKind.OBJECT, ArgumentKind.ABSENT})


@dataclass(frozen=True, slots=True)
class ArgumentRoleMap:
    """Argument position of every role; ``text`` is mandatory."""

    text: int
    text_plural: int | None = None
    context: int | None = None
    comments: int | None = None

    def __post_init__(self) -> None:
        seen: dict[int, Role] = {}
        for role in Role:
            position = getattr(self, role.value)
            if position is None:
                if role is Role.TEXT:
                    raise ConfigurationError.invalid_role_map("'text' position is required")
                continue
            if isinstance(position, bool) or not isinstance(position, int) or position < 0:
                raise ConfigurationError.invalid_role_map(
                    f"position of '{role.value}' must be a non-negative integer",
                    role=role.value,
                    position=str(position),
                )
            if position in seen:
                raise ConfigurationError.invalid_role_map(
                    f"'{role.value}' and '{seen[position].value}' share position {position}",
                    position=position,
                )
            seen[position] = role

    def ordered(self) -> list[tuple[Role, int]]:
        """(role, position) pairs in ascending position order."""
        pairs = [
            (role, position)
            for role in Role
            if (position := getattr(self, role.value)) is not None
        ]
        return sorted(pairs, key=lambda pair: pair[1])


@dataclass(frozen=True, slots=True)
class RoleSlot:
    role: Role
    arg_type: ArgType
    accepts: frozenset[ArgumentKind]


def build_slots(role_map: ArgumentRoleMap, comments: CommentConfig | None) -> list[RoleSlot]:
    """Role slots in position order with the argument kinds each accepts."""
    if comments is None:
        comment_kinds = _TEXT_OR_ABSENT
    elif comments.fallback:
        comment_kinds = _OBJECT_OR_ABSENT
    else:
        comment_kinds = _ANY_COMMENT

    slots = []
    for role, _position in role_map.ordered():
        if role is Role.TEXT:
            accepts = _TEXT_ONLY
        elif role is Role.COMMENTS:
            accepts = comment_kinds
        else:
            accepts = _TEXT_OR_ABSENT
        slots.append(RoleSlot(role, _ARG_TYPES[role], accepts))
    return slots


def fallback_transition(remaining: Sequence[ArgType]) -> tuple[ArgType, ...] | None:
    """Types left after skipping the first unresolved role, or None.

    A comment role may be skipped whenever another role follows it. A string
    role may be skipped only when a string or comment role follows it. The
    required text role is never skipped.
    """
    if len(remaining) < 2:
        return None
    head, successor = remaining[0], remaining[1]
    if head is ArgType.COMMENT:
        return tuple(remaining[1:])
    if head is ArgType.STRING and successor in (ArgType.STRING, ArgType.COMMENT):
        return tuple(remaining[1:])
    return None


def classify_roles(
    arguments: Sequence[Argument | None],
    slots: Sequence[RoleSlot],
    fallback: bool,
) -> dict[Role, Argument]:
    """Assign arguments to role slots.

    ``arguments[i]`` is the argument found at the position of ``slots[i]``
    (None when the call has fewer arguments). The state is the pair
    (first unresolved slot, first unconsumed argument); a fallback step skips
    the failing slot and re-reads its argument for the next slot. Roles
    resolved before a failure are kept.
    """
    resolved: dict[Role, Argument] = {}
    slot_start = arg_start = 0

    while True:
        remaining = slots[slot_start:]
        for offset, slot in enumerate(remaining):
            index = arg_start + offset
            argument = arguments[index] if index < len(arguments) else None
            if argument is not None and argument.kind in slot.accepts:
                resolved[slot.role] = argument
                continue
            if fallback and fallback_transition([s.arg_type for s in remaining[offset:]]):
                slot_start, arg_start = slot_start + offset + 1, arg_start + offset
                break
            return resolved
        else:
            return resolved


@dataclass(frozen=True, slots=True)
class ExtractedMessage:
    """A message read from one call site.

    ``consumed_spans`` are the spans of the arguments that were assigned a
    role, in source order.
    """

    text: str
    text_plural: str | None = None
    context: str | None = None
    comments: tuple[str, ...] = ()
    identifier: str | None = None
    consumed_spans: tuple[Span, ...] = ()
    references: tuple[str, ...] = ()
    line: int | None = None


def _text_of(argument: Argument | None, content: ContentOptions) -> str | None:
    if argument is None or argument.kind is not ArgumentKind.TEXT or not argument.text:
        return None
    return content.normalize(argument.text)


def resolve(
    arguments: Sequence[Node],
    role_map: ArgumentRoleMap,
    comments: CommentConfig | None = None,
    content: ContentOptions | None = None,
) -> ExtractedMessage | None:
    """Classify call arguments into a message.

    Returns:
        The message, or None when no text literal could be assigned to the
        ``text`` role.
    """
    content = content or ContentOptions()

    slots = build_slots(role_map, comments)
    ordered = [
        classify_argument(arguments[position]) if position < len(arguments) else None
        for _role, position in role_map.ordered()
    ]
    fallback = comments is not None and comments.fallback
    resolved = classify_roles(ordered, slots, fallback)

    text_argument = resolved.get(Role.TEXT)
    if text_argument is None or text_argument.text is None:
        return None

    text = content.normalize(text_argument.text)
    text_plural = _text_of(resolved.get(Role.TEXT_PLURAL), content)
    context = _text_of(resolved.get(Role.CONTEXT), content)

    comment_lines: list[str] = []
    comment_argument = resolved.get(Role.COMMENTS)
    if comment_argument is not None:
        if comment_argument.kind is ArgumentKind.OBJECT and comments is not None:
            comment_lines = flatten(comment_argument.node, comments, text=text, context=context)
        elif comment_argument.kind is ArgumentKind.TEXT and comment_argument.text is not None:
            comment_lines = content.normalize(comment_argument.text).split("\n")

    return ExtractedMessage(
        text=text,
        text_plural=text_plural,
        context=context,
        comments=tuple(comment_lines),
        consumed_spans=tuple(sorted(argument.span for argument in resolved.values())),
    )
