"""Static registry of the research tools advertised to the MCP host."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import DEFAULT_AGENT, DEFAULT_MODEL


class ResearchTool(str, Enum):
    """The four tools this server exposes."""

    START_RESEARCH = "start_research"
    GET_RESEARCH_STATUS = "get_research_status"
    RESEARCH_WITH_SOURCES = "research_with_sources"
    LIST_RESEARCH_MODELS = "list_research_models"


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and JSON input schema of one tool."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))


def _string_schema(argument: str, description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {argument: {"type": "string", "description": description}},
        "required": [argument],
    }


QUERY_DESCRIPTION = "the research question or topic to investigate"
TASK_ID_DESCRIPTION = "the task_id returned by start_research"
QUICK_QUERY_DESCRIPTION = "the research question"

TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=ResearchTool.START_RESEARCH.value,
        description=(
            "Start a deep research task using Google's Deep Research agent.\n"
            "Performs multi-step web research with citations.\n"
            "Returns immediately with a task_id - use get_research_status to check results.\n"
            "Research typically takes 2-20 minutes."
        ),
        input_schema=_string_schema("query", QUERY_DESCRIPTION),
    ),
    ToolDescriptor(
        name=ResearchTool.GET_RESEARCH_STATUS.value,
        description=(
            "Check the status and retrieve results of a research task.\n"
            "IMPORTANT: research takes 2-20 minutes. Do NOT poll continuously.\n"
            'If status is "in_progress", wait for the user to ask again later or do other tasks first.\n'
            "Only call this when the user explicitly asks to check the research status."
        ),
        input_schema=_string_schema("task_id", TASK_ID_DESCRIPTION),
    ),
    ToolDescriptor(
        name=ResearchTool.RESEARCH_WITH_SOURCES.value,
        description=(
            "Quick research using Google Search grounding (returns in seconds).\n"
            "Use this for fast queries that don't need deep investigation.\n"
            "For comprehensive research, use start_research instead."
        ),
        input_schema=_string_schema("query", QUICK_QUERY_DESCRIPTION),
    ),
    ToolDescriptor(
        name=ResearchTool.LIST_RESEARCH_MODELS.value,
        description="List available research models and agents.",
    ),
)

_BY_NAME: dict[str, ToolDescriptor] = {descriptor.name: descriptor for descriptor in TOOLS}


def get_descriptor(tool: ResearchTool) -> ToolDescriptor:
    """Look up the descriptor for a tool."""
    return _BY_NAME[tool.value]


def research_models(agent: str = DEFAULT_AGENT, model: str = DEFAULT_MODEL) -> list[dict[str, str]]:
    """Describe the research agent and the grounded fallback model."""
    return [
        {
            "name": agent,
            "type": "agent",
            "description": "Gemini Deep Research agent - for long-running research tasks (2-20 min)",
        },
        {
            "name": f"{model} + grounding",
            "type": "model",
            "description": "Quick research with Google Search grounding (seconds)",
        },
    ]


RESEARCH_MODELS = research_models()
