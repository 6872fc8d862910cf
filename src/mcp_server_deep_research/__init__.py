"""MCP server for Gemini Deep Research."""

from .client import ResearchClient
from .config import settings
from .exceptions import ConfigurationError, DeepResearchError, ErrorKind, ResearchClientError
from .server import main, serve

__all__ = [
    "main",
    "serve",
    "settings",
    "ResearchClient",
    "DeepResearchError",
    "ConfigurationError",
    "ErrorKind",
    "ResearchClientError",
]
