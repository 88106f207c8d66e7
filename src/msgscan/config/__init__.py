"""Config module exports."""

from msgscan.config.loader import load_config
from msgscan.config.models import (
    ExtractorConfig,
    LocationConfig,
    LoggingConfig,
    MsgScanConfig,
)

__all__ = [
    "load_config",
    "MsgScanConfig",
    "ExtractorConfig",
    "LocationConfig",
    "LoggingConfig",
]
