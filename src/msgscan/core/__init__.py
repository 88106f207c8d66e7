"""Core module exports."""

from msgscan.core.errors import (
    ConfigurationError,
    ErrorCode,
    IdentifierError,
    MalformedCommentError,
    MsgScanError,
    PluralConflictError,
    UnsupportedSourceError,
)
from msgscan.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ConfigurationError",
    "ErrorCode",
    "IdentifierError",
    "MalformedCommentError",
    "MsgScanError",
    "PluralConflictError",
    "UnsupportedSourceError",
    # Logging
    "configure_logging",
    "get_logger",
]
