"""Message catalog and definition registry."""

from msgscan.catalog.builder import CatalogBuilder
from msgscan.catalog.models import CatalogMessage, Definition, ExtractionStats, Message
from msgscan.catalog.registry import DefinitionRegistry

__all__ = [
    "CatalogBuilder",
    "CatalogMessage",
    "Definition",
    "DefinitionRegistry",
    "ExtractionStats",
    "Message",
]
