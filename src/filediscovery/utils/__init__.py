"""Utility helpers shared across file discovery modules."""

from .helpers import in_list, quote_literal
from .logging import configure_logging, get_logger, log_timing, logging_context

__all__ = [
    "configure_logging",
    "get_logger",
    "logging_context",
    "log_timing",
    "quote_literal",
    "in_list",
]
