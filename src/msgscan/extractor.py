"""Extractor facade: parses sources and folds results into one catalog.

Usage::

    extractor = MessageExtractor(
        calls=[CallRule(("t", "i18n.t"), ArgumentRoleMap(text=0, context=1))],
    )
    extractor.parse_files(["src/app.ts", "src/menu.js"])
    for message in extractor.get_messages():
        print(message.context, message.text)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar

import structlog

from msgscan.catalog.builder import CatalogBuilder
from msgscan.catalog.models import CatalogMessage, Definition, ExtractionStats, Message
from msgscan.catalog.registry import DefinitionRegistry
from msgscan.core.errors import ConfigurationError, UnsupportedSourceError
from msgscan.extraction.walker import (
    STRING_SOURCE_NAME,
    CallRule,
    ExtractionResult,
    LocationRule,
    extract,
)
from msgscan.parsing.packs import is_component_ext
from msgscan.parsing.treesitter import TreeSitterParser

log = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ScriptFragment:
    """A script embedded in a component file.

    Attributes:
        text: Script source.
        start_line: Zero-based line of the first script line in the file.
        start_offset: Byte offset of the script in the file.
        language: Grammar the script is written in.
    """

    text: str
    start_line: int = 0
    start_offset: int = 0
    language: str = "javascript"


class FragmentSplitter(Protocol):
    """Splits a component file (Svelte, Vue, HTML) into script fragments."""

    def split(self, source: str, file_name: str) -> Iterable[ScriptFragment]: ...


class CatalogSerializer(Protocol):
    """Writes the ordered message list in some catalog format."""

    def serialize(self, messages: list[Message]) -> str: ...


class MessageExtractor:
    """Owns one catalog, one definition registry and run statistics.

    Units are folded into the catalog as soon as they are extracted; a unit
    that raises leaves the units before it in place.
    """

    def __init__(
        self,
        *,
        calls: Iterable[CallRule] = (),
        locations: Iterable[LocationRule] = (),
        splitter: FragmentSplitter | None = None,
        parser: TreeSitterParser | None = None,
    ) -> None:
        self.calls: list[CallRule] = list(calls)
        self.locations: list[LocationRule] = list(locations)
        self.splitter = splitter
        self.stats = ExtractionStats()
        self.catalog = CatalogBuilder(self.stats)
        self.registry = DefinitionRegistry()
        self._parser = parser or TreeSitterParser()

    def add_call_rule(self, rule: CallRule) -> None:
        self.calls.append(rule)

    def add_location_rule(self, rule: LocationRule) -> None:
        self.locations.append(rule)

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse_string(
        self,
        source: str,
        file_name: str | None = None,
        *,
        line_start: int = 1,
        start_offset: int = 0,
        language: str | None = None,
    ) -> ExtractionResult:
        """Extract one script unit and fold it into the catalog."""
        if not self.calls and not self.locations:
            raise ConfigurationError.invalid_value(
                "extractors", [], "no call or location rules configured"
            )
        if language is None:
            detected = TreeSitterParser.detect_language(file_name) if file_name else None
            language = detected or "javascript"

        with structlog.contextvars.bound_contextvars(file=file_name or STRING_SOURCE_NAME):
            result = extract(
                source,
                file_name=file_name,
                line_start=line_start,
                start_offset=start_offset,
                locations=self.locations,
                calls=self.calls,
                language=language,
                parser=self._parser,
            )

            for message in result.messages:
                self.catalog.add_message(
                    CatalogMessage(
                        text=message.text,
                        text_plural=message.text_plural,
                        context=message.context,
                        references=list(message.references),
                        comments=list(message.comments),
                        identifier=message.identifier,
                    )
                )
        self.registry.extend(result.definitions)

        self.stats.parsed_files += 1
        if result.messages:
            self.stats.parsed_files_with_messages += 1
        return result

    def parse_fragments(
        self, fragments: Iterable[ScriptFragment], file_name: str | None = None
    ) -> list[ExtractionResult]:
        return [
            self.parse_string(
                fragment.text,
                file_name,
                line_start=fragment.start_line + 1,
                start_offset=fragment.start_offset,
                language=fragment.language,
            )
            for fragment in fragments
        ]

    def parse_file(self, path: Path | str, encoding: str = "utf-8") -> list[ExtractionResult]:
        """Extract a script or component file.

        Raises:
            UnsupportedSourceError: Unknown file type, a component file
                without a configured splitter, or bytes that do not decode
                with ``encoding``.
        """
        path = Path(path)
        ext = path.suffix.lower().lstrip(".")
        try:
            source = path.read_bytes().decode(encoding)
        except UnicodeDecodeError as e:
            raise UnsupportedSourceError.undecodable(str(path), encoding, e.reason) from e

        if is_component_ext(ext):
            if self.splitter is None:
                raise UnsupportedSourceError.needs_splitter(str(path))
            return self.parse_fragments(self.splitter.split(source, str(path)), str(path))

        language = TreeSitterParser.detect_language(path)
        if language is None:
            raise UnsupportedSourceError.unknown_extension(str(path))
        return [self.parse_string(source, str(path), language=language)]

    def parse_files(self, paths: Iterable[Path | str], encoding: str = "utf-8") -> None:
        count = 0
        for path in paths:
            self.parse_file(path, encoding)
            count += 1
        log.info(
            "extract.files_done",
            files=count,
            messages=self.stats.messages,
            usages=self.stats.message_usages,
        )

    # =========================================================================
    # Results
    # =========================================================================

    def add_message(self, message: CatalogMessage) -> None:
        self.catalog.add_message(message)

    def get_messages(self) -> list[Message]:
        return self.catalog.get_messages()

    def get_contexts(self) -> list[str]:
        return self.catalog.get_contexts()

    def get_messages_by_context(self, context: str) -> list[Message]:
        return self.catalog.get_messages_by_context(context)

    def get_message_dictionary(self) -> dict[str, str]:
        return self.catalog.get_message_dictionary()

    def get_transformed_messages(self, func: Callable[[list[CatalogMessage]], T]) -> T:
        return self.catalog.get_transformed_messages(func)

    def serialize(self, serializer: CatalogSerializer) -> str:
        return serializer.serialize(self.get_messages())

    def get_definitions(self) -> dict[str, list[Definition]]:
        return self.registry.get_definitions()

    def get_definitions_by_file(self, file_name: str) -> list[Definition]:
        return self.registry.get_definitions_by_file(file_name)

    def save_definitions(self, path: Path | str) -> None:
        Path(path).write_text(self.registry.to_json(), encoding="utf-8")

    def get_stats(self) -> ExtractionStats:
        return self.stats
