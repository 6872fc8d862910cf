"""Observability module for structured per-call logging."""

from .logging import (
    bind_call_context,
    clear_call_context,
    configure_stdio_logging,
    get_call_logger,
    get_current_call_id,
    setup_structured_logging,
)

__all__ = [
    "bind_call_context",
    "clear_call_context",
    "configure_stdio_logging",
    "get_call_logger",
    "get_current_call_id",
    "setup_structured_logging",
]
