"""Shared infrastructure for the Wildscapes engine."""

from .logging_config import (
    COMPACT_FORMAT,
    DEFAULT_FORMAT,
    DETAILED_FORMAT,
    STRUCTURED_FORMAT,
    LogContext,
    configure_third_party_loggers,
    get_logger,
    setup_logging,
)

__all__ = [
    "COMPACT_FORMAT",
    "DEFAULT_FORMAT",
    "DETAILED_FORMAT",
    "STRUCTURED_FORMAT",
    "LogContext",
    "configure_third_party_loggers",
    "get_logger",
    "setup_logging",
]
