"""Message catalog: merges usages of the same message across call sites."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

import structlog

from msgscan.catalog.models import CatalogMessage, ExtractionStats, Message
from msgscan.core.errors import PluralConflictError

log = structlog.get_logger()

T = TypeVar("T")


def _union(existing: list[str], new: Iterable[str]) -> list[str]:
    """Ordered set union, first occurrence wins."""
    return list(dict.fromkeys([*existing, *new]))


class CatalogBuilder:
    """Accumulates messages keyed by context, then text.

    Two usages of one (context, text) pair are merged: references and
    comments are unioned in order, a newly supplied plural, context or
    identifier overwrites the stored one. Recording a second, different
    plural form for the same pair raises ``PluralConflictError``.
    """

    def __init__(self, stats: ExtractionStats | None = None) -> None:
        self.stats = stats if stats is not None else ExtractionStats()
        self._contexts: dict[str, dict[str, CatalogMessage]] = {}

    def add_message(self, message: CatalogMessage) -> None:
        context_key = message.context or ""
        bucket = self._contexts.get(context_key)
        if bucket is None:
            bucket = self._contexts[context_key] = {}
            self.stats.contexts += 1

        incoming = CatalogMessage(
            text=message.text,
            text_plural=message.text_plural or None,
            context=message.context or None,
            references=list(message.references),
            comments=list(message.comments),
            identifier=message.identifier or None,
        )

        existing = bucket.get(incoming.text)
        if existing is None:
            bucket[incoming.text] = incoming
            self.stats.messages += 1
            if incoming.text_plural:
                self.stats.plural_messages += 1
        else:
            self._merge(existing, incoming)

        self.stats.message_usages += 1

    def _merge(self, existing: CatalogMessage, incoming: CatalogMessage) -> None:
        if (
            incoming.text_plural
            and existing.text_plural
            and incoming.text_plural != existing.text_plural
        ):
            raise PluralConflictError.incompatible(
                existing.text, existing.text_plural, incoming.text_plural
            )

        if incoming.text_plural and not existing.text_plural:
            self.stats.plural_messages += 1
            log.debug("catalog.plural_added", text=existing.text, context=existing.context)

        existing.references = _union(existing.references, incoming.references)
        existing.comments = _union(existing.comments, incoming.comments)
        if incoming.text_plural is not None:
            existing.text_plural = incoming.text_plural
        if incoming.context is not None:
            existing.context = incoming.context
        if incoming.identifier is not None:
            existing.identifier = incoming.identifier

    def get_raw_messages(self) -> list[CatalogMessage]:
        """Stored entries ordered by context, then text."""
        return [
            self._contexts[context][text]
            for context in sorted(self._contexts)
            for text in sorted(self._contexts[context])
        ]

    def get_messages(self) -> list[Message]:
        return [entry.to_message() for entry in self.get_raw_messages()]

    def get_contexts(self) -> list[str]:
        return sorted(self._contexts)

    def get_messages_by_context(self, context: str) -> list[Message]:
        bucket = self._contexts.get(context, {})
        return [bucket[text].to_message() for text in sorted(bucket)]

    def get_message_dictionary(self) -> dict[str, str]:
        """Identifier to text for every entry that has an identifier."""
        return {
            entry.identifier: entry.text
            for entry in self.get_raw_messages()
            if entry.identifier is not None
        }

    def get_transformed_messages(self, func: Callable[[list[CatalogMessage]], T]) -> T:
        """Apply ``func`` to the ordered entries, identifiers included."""
        return func(self.get_raw_messages())
