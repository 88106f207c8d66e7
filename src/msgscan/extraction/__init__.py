"""Message and definition extraction from syntax trees."""

from msgscan.extraction.comments import CommentConfig, flatten
from msgscan.extraction.identifiers import build_identifier
from msgscan.extraction.literals import ContentOptions
from msgscan.extraction.matcher import MatchResult, match
from msgscan.extraction.patterns import Pattern, pattern_from_dict
from msgscan.extraction.roles import ArgumentRoleMap, ExtractedMessage, resolve
from msgscan.extraction.walker import CallRule, ExtractionResult, LocationRule, extract

__all__ = [
    "ArgumentRoleMap",
    "CallRule",
    "CommentConfig",
    "ContentOptions",
    "ExtractedMessage",
    "ExtractionResult",
    "LocationRule",
    "MatchResult",
    "Pattern",
    "build_identifier",
    "extract",
    "flatten",
    "match",
    "pattern_from_dict",
    "resolve",
]
