"""Structured logging with per-call context using structlog and contextvars."""

import logging
import sys
from contextvars import ContextVar

import structlog

current_call_id: ContextVar[str | None] = ContextVar("current_call_id", default=None)
current_tool_name: ContextVar[str | None] = ContextVar("current_tool_name", default=None)

# Dependencies that log request details at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "asyncio", "google_genai", "google.genai", "mcp", "fastmcp")

_configured = False


def configure_stdio_logging() -> None:
    """Send every log record to stderr.

    In stdio mode, stdout is reserved exclusively for JSON-RPC messages.
    """
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root = logging.getLogger()
    root.handlers = [stderr_handler]
    root.setLevel(logging.WARNING)

    for logger_name in NOISY_LOGGERS:
        dep_logger = logging.getLogger(logger_name)
        dep_logger.setLevel(logging.WARNING)
        dep_logger.handlers = [stderr_handler]
        dep_logger.propagate = False


def setup_structured_logging(level: str = "INFO") -> None:
    """Configure structlog with JSON output and per-call context.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    global _configured
    if _configured:
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.getLogger("mcp_server_deep_research").setLevel(getattr(logging, level.upper()))

    _configured = True


def bind_call_context(call_id: str, tool_name: str) -> None:
    """Bind call context for all subsequent logs in this async context.

    Args:
        call_id: Unique identifier of the tool invocation
        tool_name: Name of the tool being executed
    """
    current_call_id.set(call_id)
    current_tool_name.set(tool_name)
    structlog.contextvars.bind_contextvars(call_id=call_id, tool_name=tool_name)


def clear_call_context() -> None:
    """Clear call context after the tool call completes."""
    current_call_id.set(None)
    current_tool_name.set(None)
    structlog.contextvars.clear_contextvars()


def get_call_logger(name: str = "mcp_server_deep_research") -> structlog.stdlib.BoundLogger:
    """Get a structlog logger carrying the current call context."""
    return structlog.get_logger(name)


def get_current_call_id() -> str | None:
    """Get the current call ID from context."""
    return current_call_id.get()
