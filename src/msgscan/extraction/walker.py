"""Per-unit extraction: one tree walk feeding location patterns and call rules.

Usage::

    result = extract(
        "t('Apple', 'Apples')",
        file_name="src/app.js",
        calls=[CallRule(("t",), ArgumentRoleMap(text=0, text_plural=1))],
    )
    result.messages[0].text_plural  # "Apples"
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

import structlog

from msgscan.catalog.models import Definition
from msgscan.core.errors import ConfigurationError
from msgscan.extraction.comments import CommentConfig
from msgscan.extraction.identifiers import (
    DEFAULT_IDENTIFIER_KEYS,
    build_identifier,
    validate_identifier_keys,
)
from msgscan.extraction.literals import ContentOptions
from msgscan.extraction.matcher import match
from msgscan.extraction.patterns import Pattern
from msgscan.extraction.roles import ArgumentRoleMap, ExtractedMessage, resolve
from msgscan.parsing.nodes import Span, call_arguments, callee_name, named_children, span_of
from msgscan.parsing.treesitter import TreeSitterParser

if TYPE_CHECKING:
    from tree_sitter import Node

log = structlog.get_logger()

STRING_SOURCE_NAME = "<string>"


@dataclass(frozen=True, slots=True)
class LocationRule:
    """A definition pattern, optionally limited to one file."""

    pattern: Pattern
    identifier: str | None = None
    restrict_to_file: str | None = None

    def applies_to(self, file_name: str | None) -> bool:
        return self.restrict_to_file is None or self.restrict_to_file == file_name


@dataclass(frozen=True, slots=True)
class CallRule:
    """Translator callees and how to read their arguments."""

    callee_names: tuple[str, ...]
    roles: ArgumentRoleMap
    comments: CommentConfig | None = None
    content: ContentOptions = field(default_factory=ContentOptions)
    identifier_keys: tuple[str, ...] = DEFAULT_IDENTIFIER_KEYS

    def __post_init__(self) -> None:
        names = (self.callee_names,) if isinstance(self.callee_names, str) else self.callee_names
        names = tuple(names)
        if not names:
            raise ConfigurationError.invalid_callee(names)
        for name in names:
            if not isinstance(name, str) or not all(part for part in name.split(".")):
                raise ConfigurationError.invalid_callee(name)
        object.__setattr__(self, "callee_names", names)
        object.__setattr__(self, "identifier_keys", validate_identifier_keys(self.identifier_keys))


@dataclass
class ExtractionResult:
    messages: list[ExtractedMessage] = field(default_factory=list)
    definitions: list[Definition] = field(default_factory=list)


def extract(
    source: bytes | str,
    *,
    file_name: str | None = None,
    line_start: int = 1,
    start_offset: int = 0,
    locations: Iterable[LocationRule] = (),
    calls: Iterable[CallRule] = (),
    language: str = "javascript",
    parser: TreeSitterParser | None = None,
) -> ExtractionResult:
    """Extract messages and definitions from one script unit.

    Args:
        source: Script text of the unit.
        file_name: Name used in references and definitions.
        line_start: Line number of the first line of ``source`` in its file.
        start_offset: Byte offset of ``source`` in its file; added to every
            reported definition span.
        locations: Definition patterns to match against every node.
        calls: Translator call rules.
        language: Grammar to parse with.
        parser: Parser to reuse across units.

    Raises:
        ConfigurationError: A pattern produced the wrong number of captures.
        MalformedCommentError: A comment payload is malformed.
        IdentifierError: A message identifier could not be built.
    """
    parser = parser or TreeSitterParser()
    parsed = parser.parse(source, language)
    if parsed.error_count:
        log.warning(
            "extract.syntax_errors",
            file=file_name,
            language=parsed.language,
            errors=parsed.error_count,
        )

    active_locations = [rule for rule in locations if rule.applies_to(file_name)]
    call_rules = list(calls)
    result = ExtractionResult()
    owner = file_name or STRING_SOURCE_NAME

    # Pre-order, children in source order
    stack: list[Node] = [parsed.root_node]
    while stack:
        node = stack.pop()

        for rule in active_locations:
            spans = match(node, rule.pattern, file_name=file_name)
            if not spans:
                continue
            for span in spans:
                result.definitions.append(
                    Definition(
                        file_name=owner,
                        text=_slice(parsed.source, span),
                        start=span.start + start_offset,
                        end=span.end + start_offset,
                        identifier=rule.identifier,
                    )
                )

        if node.type == "call_expression" and call_rules:
            _visit_call(node, parsed.source, call_rules, result, file_name, line_start, start_offset)

        stack.extend(reversed(named_children(node)))

    log.debug(
        "extract.unit_done",
        file=file_name,
        messages=len(result.messages),
        definitions=len(result.definitions),
    )
    return result


def _visit_call(
    node: Node,
    source: bytes,
    rules: Sequence[CallRule],
    result: ExtractionResult,
    file_name: str | None,
    line_start: int,
    start_offset: int,
) -> None:
    function = node.child_by_field_name("function")
    if function is None:
        return
    name = callee_name(function)
    if name is None:
        return

    for rule in rules:
        if name not in rule.callee_names:
            continue
        arguments = call_arguments(node)
        if arguments is None:
            continue
        line = line_start + node.start_point[0]
        message = resolve(arguments, rule.roles, rule.comments, rule.content)
        if message is None:
            log.debug("extract.call_ignored", callee=name, file=file_name, line=line)
            continue

        identifier = build_identifier(message, rule.identifier_keys, file_name)
        message = replace(
            message,
            identifier=identifier,
            line=line,
            references=(f"{file_name}:{line}",) if file_name else (),
        )
        result.messages.append(message)

        call_span = span_of(node)
        result.definitions.append(
            Definition(
                file_name=file_name or STRING_SOURCE_NAME,
                text=_slice(source, call_span),
                start=call_span.start + start_offset,
                end=call_span.end + start_offset,
                identifier=identifier,
                definition=False,
                stripped=strip_arguments(node, source, message.consumed_spans),
            )
        )


def strip_arguments(node: Node, source: bytes, consumed: Iterable[Span]) -> str:
    """Call text with the consumed arguments removed: ``t('a', n)`` -> ``t(n)``."""
    args_node = node.child_by_field_name("arguments")
    if args_node is None:
        return _slice(source, span_of(node))
    consumed = set(consumed)
    kept = [
        _slice(source, span_of(argument))
        for argument in named_children(args_node)
        if span_of(argument) not in consumed
    ]
    head = source[node.start_byte : args_node.start_byte].decode("utf-8", errors="replace")
    return f"{head}({', '.join(kept)})"


def _slice(source: bytes, span: Span) -> str:
    return source[span.start : span.end].decode("utf-8", errors="replace")
