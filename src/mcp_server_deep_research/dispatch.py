"""Routes a tool name and its arguments to a handler and wraps the result.

Every failure, including an unknown tool name, comes back as an
error-flagged ``ToolResponse``; nothing propagates to the transport.
"""

import json
import uuid
from dataclasses import dataclass
from typing import Any, assert_never

from .exceptions import InvalidArgumentsError, UnknownToolError
from .handlers import ResearchHandlers
from .observability import bind_call_context, clear_call_context, get_call_logger
from .tools import ResearchTool, get_descriptor


@dataclass(frozen=True)
class ToolResponse:
    """Text content returned to the host, flagged when the call failed."""

    text: str
    is_error: bool = False

    @classmethod
    def from_result(cls, result: Any) -> "ToolResponse":
        return cls(text=json.dumps(result, indent=2))

    @classmethod
    def from_error(cls, error: Exception) -> "ToolResponse":
        return cls(text=json.dumps({"error": str(error)}), is_error=True)


def resolve_tool(name: str) -> ResearchTool:
    """Map a tool name onto the registry enum."""
    try:
        return ResearchTool(name)
    except ValueError:
        raise UnknownToolError(f"unknown tool: {name}") from None


def validate_arguments(tool: ResearchTool, arguments: dict[str, Any] | None) -> dict[str, Any]:
    """Check that every required argument is present and a non-empty string."""
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidArgumentsError(f"{tool.value}: arguments must be an object")

    for name in get_descriptor(tool).required:
        value = arguments.get(name)
        if value is None:
            raise InvalidArgumentsError(f"{tool.value}: missing required argument '{name}'")
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgumentsError(f"{tool.value}: argument '{name}' must be a non-empty string")
    return arguments


class ToolDispatcher:
    """Explicit tool -> handler routing over the ResearchTool enum."""

    def __init__(self, handlers: ResearchHandlers):
        self.handlers = handlers

    async def _invoke(self, tool: ResearchTool, arguments: dict[str, Any]) -> Any:
        match tool:
            case ResearchTool.START_RESEARCH:
                return await self.handlers.start_research(arguments["query"])
            case ResearchTool.GET_RESEARCH_STATUS:
                return await self.handlers.get_research_status(arguments["task_id"])
            case ResearchTool.RESEARCH_WITH_SOURCES:
                return await self.handlers.research_with_sources(arguments["query"])
            case ResearchTool.LIST_RESEARCH_MODELS:
                return self.handlers.list_research_models()
            case _:
                assert_never(tool)

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Run one tool call and return its envelope."""
        bind_call_context(str(uuid.uuid4()), name)
        call_logger = get_call_logger()
        call_logger.info("tool_call_started")
        try:
            tool = resolve_tool(name)
            valid_arguments = validate_arguments(tool, arguments)
            result = await self._invoke(tool, valid_arguments)
        except (UnknownToolError, InvalidArgumentsError) as e:
            call_logger.warning("tool_call_rejected", error=str(e))
            return ToolResponse.from_error(e)
        except Exception as e:
            call_logger.error("tool_call_failed", error=str(e), exc_info=True)
            return ToolResponse.from_error(e)
        else:
            call_logger.info("tool_call_completed")
            return ToolResponse.from_result(result)
        finally:
            clear_call_context()
