"""Message identifiers used to link call sites to catalog entries."""

from __future__ import annotations

import json
from collections.abc import Sequence

from msgscan.core.errors import ConfigurationError, IdentifierError
from msgscan.extraction.roles import ExtractedMessage

IDENTIFIER_FIELDS = ("text", "text_plural", "context")
# Key names used inside multi-key identifiers.
_JSON_KEYS = {"text": "text", "text_plural": "textPlural", "context": "context"}
DEFAULT_IDENTIFIER_KEYS: tuple[str, ...] = ("text", "context")


def validate_identifier_keys(keys: Sequence[str]) -> tuple[str, ...]:
    keys = tuple(keys)
    if not keys:
        raise ConfigurationError.invalid_value("identifier_keys", keys, "must not be empty")
    for key in keys:
        if key not in IDENTIFIER_FIELDS:
            raise ConfigurationError.invalid_value(
                "identifier_keys", key, f"must be one of {', '.join(IDENTIFIER_FIELDS)}"
            )
    return keys


def build_identifier(
    message: ExtractedMessage,
    keys: Sequence[str] = DEFAULT_IDENTIFIER_KEYS,
    file_name: str | None = None,
) -> str:
    """Identifier of ``message`` built from ``keys``.

    A single key yields its value as is. Several keys yield a compact JSON
    object of the keys that have a value, in key order, e.g.
    ``{"text":"Apple","context":"fruit"}``; ``text_plural`` is written as
    ``textPlural``.

    Raises:
        IdentifierError: None of the keys has a value on the message.
    """
    if len(keys) == 1:
        value = getattr(message, keys[0])
        if value is not None:
            return value
    else:
        present = {
            _JSON_KEYS[key]: value
            for key in keys
            if (value := getattr(message, key)) is not None
        }
        if present:
            return json.dumps(present, ensure_ascii=False, separators=(",", ":"))
    raise IdentifierError.missing_keys(list(keys), message.text, file_name)
