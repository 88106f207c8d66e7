"""msgscan error types with typed error codes.

Error code ranges:
- 2xxx: Configuration (extraction rules, patterns, config files)
- 3xxx: Comment payloads
- 4xxx: Catalog
- 5xxx: Source input
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Configuration (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CAPTURE_COUNT_MISMATCH = 2010
    INVALID_PATTERN = 2011
    INVALID_ROLE_MAP = 2012
    INVALID_PROPS = 2013
    INVALID_CALLEE = 2014

    # Comment payloads (3xxx)
    MALFORMED_COMMENT = 3001
    COMMENT_TOO_DEEP = 3002

    # Catalog (4xxx)
    PLURAL_CONFLICT = 4001
    IDENTIFIER_MISSING = 4002

    # Source input (5xxx)
    UNSUPPORTED_SOURCE = 5001
    GRAMMAR_UNAVAILABLE = 5002
    SOURCE_UNDECODABLE = 5003


@dataclass(frozen=True, slots=True)
class MsgScanError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PLURAL_CONFLICT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigurationError(MsgScanError):
    """The extraction rules themselves are wrong, not the input."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigurationError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigurationError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def capture_count_mismatch(
        cls, kind: str, expected: int, actual: int, file_name: str | None = None
    ) -> "ConfigurationError":
        where = f" in file {file_name}" if file_name else ""
        return cls(
            code=ErrorCode.CAPTURE_COUNT_MISMATCH,
            message=(
                f"Pattern '{kind}' declares {expected} capture(s) "
                f"but matched {actual} span(s){where}"
            ),
            details={"kind": kind, "expected": expected, "actual": actual, "file": file_name},
        )

    @classmethod
    def invalid_pattern(cls, reason: str, **details: Any) -> "ConfigurationError":
        return cls(
            code=ErrorCode.INVALID_PATTERN,
            message=f"Invalid pattern: {reason}",
            details=details,
        )

    @classmethod
    def invalid_role_map(cls, reason: str, **details: Any) -> "ConfigurationError":
        return cls(
            code=ErrorCode.INVALID_ROLE_MAP,
            message=f"Invalid argument role map: {reason}",
            details=details,
        )

    @classmethod
    def invalid_props(cls, key: str, value: Any) -> "ConfigurationError":
        return cls(
            code=ErrorCode.INVALID_PROPS,
            message=f"Entry for comments.props.{key} has to contain exactly two strings",
            details={"key": key, "value": str(value)},
        )

    @classmethod
    def invalid_callee(cls, name: Any) -> "ConfigurationError":
        return cls(
            code=ErrorCode.INVALID_CALLEE,
            message="Callee names must be non-empty strings",
            details={"name": str(name)},
        )


class MalformedCommentError(MsgScanError):
    """A structured comment payload holds a value that cannot be rendered."""

    @classmethod
    def invalid_value(cls, key: str, text: str, context: str | None) -> "MalformedCommentError":
        return cls(
            code=ErrorCode.MALFORMED_COMMENT,
            message=(
                f'Key {key} at "{text}" with id "{context}" has invalid value. '
                "Allowed are string or object."
            ),
            details={"key": key, "text": text, "context": context},
        )

    @classmethod
    def too_deep(cls, key: str, limit: int) -> "MalformedCommentError":
        return cls(
            code=ErrorCode.COMMENT_TOO_DEEP,
            message=f"Comment payload nested deeper than {limit} levels at key {key}",
            details={"key": key, "limit": limit},
        )


class PluralConflictError(MsgScanError):
    """Two different plural forms were recorded for one message."""

    @classmethod
    def incompatible(cls, text: str, existing: str, new: str) -> "PluralConflictError":
        return cls(
            code=ErrorCode.PLURAL_CONFLICT,
            message=f"Incompatible plurals found for '{text}' ('{existing}' and '{new}')",
            details={"text": text, "existing": existing, "new": new},
        )


class IdentifierError(MsgScanError):
    """A message identifier could not be generated from the configured keys."""

    @classmethod
    def missing_keys(
        cls, keys: list[str], text: str, file_name: str | None
    ) -> "IdentifierError":
        return cls(
            code=ErrorCode.IDENTIFIER_MISSING,
            message=(
                f"Identifier from key(s) {keys} for message '{text}' in file {file_name} "
                "could not be generated. Make sure that at least one key exists on every message."
            ),
            details={"keys": keys, "text": text, "file": file_name},
        )


class UnsupportedSourceError(MsgScanError):
    """Source input that no grammar or splitter can handle."""

    @classmethod
    def unknown_extension(cls, path: str) -> "UnsupportedSourceError":
        return cls(
            code=ErrorCode.UNSUPPORTED_SOURCE,
            message=f"Unsupported file type: {path}",
            details={"path": path},
        )

    @classmethod
    def needs_splitter(cls, path: str) -> "UnsupportedSourceError":
        return cls(
            code=ErrorCode.UNSUPPORTED_SOURCE,
            message=f"Component file {path} needs a fragment splitter",
            details={"path": path},
        )

    @classmethod
    def grammar_unavailable(
        cls, language: str, package: str | None = None
    ) -> "UnsupportedSourceError":
        message = f"Language not available: {language}"
        if package is not None:
            message += f" (install {package})"
        return cls(
            code=ErrorCode.GRAMMAR_UNAVAILABLE,
            message=message,
            details={"language": language, "package": package},
        )

    @classmethod
    def undecodable(cls, path: str, encoding: str, reason: str) -> "UnsupportedSourceError":
        return cls(
            code=ErrorCode.SOURCE_UNDECODABLE,
            message=f"Cannot decode {path} as {encoding}: {reason}",
            details={"path": path, "encoding": encoding},
        )
