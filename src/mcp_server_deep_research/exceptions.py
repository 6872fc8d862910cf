"""Custom exceptions for the MCP deep research server."""

from enum import Enum


class DeepResearchError(Exception):
    """Base exception for MCP deep research errors."""

    pass


class ConfigurationError(DeepResearchError):
    """Raised when required configuration (the API key) is missing."""

    pass


class ErrorKind(str, Enum):
    """Failure categories reported by the research client adapter."""

    TRANSPORT = "transport"
    NOT_FOUND = "not_found"
    MALFORMED_RESPONSE = "malformed_response"
    API = "api"


class ResearchClientError(DeepResearchError):
    """Raised when a call to the Gemini API fails."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.args[0]}"


class UnknownToolError(DeepResearchError):
    """Raised when a tool name is not in the registry."""

    pass


class InvalidArgumentsError(DeepResearchError):
    """Raised when a tool call is missing a required argument or has the wrong type."""

    pass
