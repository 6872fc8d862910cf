"""Tool handlers: one external call per invocation, reshaped into plain JSON objects."""

import copy
import logging
from typing import TYPE_CHECKING, Any

from .exceptions import ResearchClientError
from .tools import RESEARCH_MODELS

if TYPE_CHECKING:
    from .client import ResearchClient

logger = logging.getLogger(__name__)

NO_OUTPUT_PLACEHOLDER = "research completed but no output generated"
UNKNOWN_ERROR = "unknown error"
IN_PROGRESS_MESSAGE = "research in progress, please check again later..."
GROUNDED_PROMPT = "please research the following question and provide detailed citations:\n\n{query}"
DEFAULT_TEMPERATURE = 0.7


class ResearchHandlers:
    """Implements the research tools against an injected research client."""

    def __init__(
        self,
        client: "ResearchClient",
        temperature: float = DEFAULT_TEMPERATURE,
        models: list[dict[str, str]] | None = None,
    ):
        self.client = client
        self.temperature = temperature
        self._models = models if models is not None else RESEARCH_MODELS

    async def start_research(self, query: str) -> dict[str, Any]:
        try:
            task_id = await self.client.create_interaction(query)
        except ResearchClientError as e:
            logger.error(f"Failed to start research: {e}")
            return {
                "task_id": None,
                "status": "error",
                "message": f"failed to start research: {e}",
            }

        logger.info(f"Research task started: {task_id}")
        return {
            "task_id": task_id,
            "status": "started",
            "message": (
                f"research task started. use get_research_status with task_id '{task_id}' "
                "to check progress. typically takes 2-20 minutes."
            ),
        }

    async def get_research_status(self, task_id: str) -> dict[str, Any]:
        """Poll the interaction exactly once and map its status.

        ``completed`` and ``failed`` pass through; every other status
        (queued, running, unspecified) is reported as ``in_progress``.
        """
        try:
            interaction = await self.client.get_interaction(task_id)
        except ResearchClientError as e:
            logger.error(f"Failed to get status for {task_id}: {e}")
            return {
                "task_id": task_id,
                "status": "error",
                "error": f"failed to get status: {e}",
            }

        if interaction.status == "completed":
            last_output = interaction.outputs[-1] if interaction.outputs else None
            return {
                "task_id": task_id,
                "status": "completed",
                "result": last_output or NO_OUTPUT_PLACEHOLDER,
            }

        if interaction.status == "failed":
            return {
                "task_id": task_id,
                "status": "failed",
                "error": str(interaction.error or UNKNOWN_ERROR),
            }

        logger.debug(f"Research task {task_id} still running (status={interaction.status})")
        return {
            "task_id": task_id,
            "status": "in_progress",
            "message": IN_PROGRESS_MESSAGE,
        }

    async def research_with_sources(self, query: str) -> dict[str, Any]:
        try:
            answer = await self.client.generate_grounded(GROUNDED_PROMPT.format(query=query), self.temperature)
        except ResearchClientError as e:
            logger.error(f"Grounded research failed: {e}")
            return {"error": str(e), "content": None, "sources": []}

        return {
            "content": answer.text or "",
            "sources": [source.to_dict() for source in answer.sources],
        }

    def list_research_models(self) -> list[dict[str, str]]:
        return copy.deepcopy(self._models)
