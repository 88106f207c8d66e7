"""Definition registry keyed by source file."""

from __future__ import annotations

import json
from collections.abc import Iterable

from msgscan.catalog.models import Definition


class DefinitionRegistry:
    """Definitions and call sites grouped by file, in insertion order."""

    def __init__(self) -> None:
        self._by_file: dict[str, list[Definition]] = {}

    def add(self, definition: Definition) -> None:
        self._by_file.setdefault(definition.file_name, []).append(definition)

    def extend(self, definitions: Iterable[Definition]) -> None:
        for definition in definitions:
            self.add(definition)

    def get_definitions(self) -> dict[str, list[Definition]]:
        return {file_name: list(items) for file_name, items in self._by_file.items()}

    def get_definitions_by_file(self, file_name: str) -> list[Definition]:
        return list(self._by_file.get(file_name, []))

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(
            {
                file_name: [definition.to_dict() for definition in items]
                for file_name, items in self._by_file.items()
            },
            indent=indent,
            ensure_ascii=False,
        )
