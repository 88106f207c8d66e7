"""Catalog data types."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True)
class CatalogMessage:
    """A merged catalog entry. Mutated in place as usages are folded in."""

    text: str
    text_plural: str | None = None
    context: str | None = None
    references: list[str] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    identifier: str | None = None

    def to_message(self) -> Message:
        return Message(
            text=self.text,
            text_plural=self.text_plural,
            context=self.context,
            references=tuple(self.references),
            comments=tuple(self.comments),
        )


@dataclass(frozen=True, slots=True)
class Message:
    """Public view of a catalog entry."""

    text: str
    text_plural: str | None = None
    context: str | None = None
    references: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["references"] = list(self.references)
        data["comments"] = list(self.comments)
        return data


@dataclass(frozen=True, slots=True)
class Definition:
    """A captured definition span or a message call site.

    Attributes:
        file_name: Source the span was found in.
        text: Source text of the span.
        start: Byte offset of the span start in the source.
        end: Byte offset one past the span end.
        identifier: Location identifier for definitions, message identifier
            for call sites.
        definition: True for pattern captures, False for call sites.
        stripped: Call-site text with the classified arguments removed.
    """

    file_name: str
    text: str
    start: int
    end: int
    identifier: str | None = None
    definition: bool = True
    stripped: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ExtractionStats:
    messages: int = 0
    plural_messages: int = 0
    message_usages: int = 0
    contexts: int = 0
    parsed_files: int = 0
    parsed_files_with_messages: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
