"""MCP server exposing Gemini Deep Research and grounded search as tools."""

import logging
import sys
from typing import Annotated

from .observability import configure_stdio_logging

# Configure logging BEFORE importing the SDKs so their loggers start on stderr
configure_stdio_logging()

# ruff: noqa: E402 - Intentional late imports after logging configuration
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from .client import ResearchClient
from .config import settings
from .dispatch import ToolDispatcher, ToolResponse
from .exceptions import ConfigurationError
from .handlers import ResearchHandlers
from .observability import setup_structured_logging
from .tools import QUERY_DESCRIPTION, QUICK_QUERY_DESCRIPTION, TASK_ID_DESCRIPTION, ResearchTool, get_descriptor, research_models

logger = logging.getLogger("mcp_server_deep_research")
logger.setLevel(getattr(logging, settings.server.logging_level.upper()))

SERVER_NAME = "mcp_server_deep_research"


def build_client() -> ResearchClient:
    """Create the research client from settings.

    Raises:
        ConfigurationError: If no API key is configured
    """
    return ResearchClient(
        api_key=settings.gemini.get_api_key(),
        agent=settings.gemini.agent,
        model=settings.gemini.model,
    )


def build_dispatcher(client: ResearchClient) -> ToolDispatcher:
    setup_structured_logging(settings.server.logging_level)
    handlers = ResearchHandlers(
        client,
        temperature=settings.gemini.temperature,
        models=research_models(settings.gemini.agent, settings.gemini.model),
    )
    return ToolDispatcher(handlers)


def _unwrap(response: ToolResponse) -> str:
    """Return the text of a successful response or raise it as an MCP tool error."""
    if response.is_error:
        raise ToolError(response.text)
    return response.text


def serve(client: ResearchClient | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        client: Research client to use; built from settings when omitted
    """
    dispatcher = build_dispatcher(client if client is not None else build_client())
    server = FastMCP(SERVER_NAME)

    start = get_descriptor(ResearchTool.START_RESEARCH)
    status = get_descriptor(ResearchTool.GET_RESEARCH_STATUS)
    quick = get_descriptor(ResearchTool.RESEARCH_WITH_SOURCES)
    models = get_descriptor(ResearchTool.LIST_RESEARCH_MODELS)

    @server.tool(name=start.name, description=start.description)
    async def start_research(query: Annotated[str, Field(description=QUERY_DESCRIPTION)]) -> str:
        return _unwrap(await dispatcher.dispatch(start.name, {"query": query}))

    @server.tool(name=status.name, description=status.description)
    async def get_research_status(task_id: Annotated[str, Field(description=TASK_ID_DESCRIPTION)]) -> str:
        return _unwrap(await dispatcher.dispatch(status.name, {"task_id": task_id}))

    @server.tool(name=quick.name, description=quick.description)
    async def research_with_sources(query: Annotated[str, Field(description=QUICK_QUERY_DESCRIPTION)]) -> str:
        return _unwrap(await dispatcher.dispatch(quick.name, {"query": query}))

    @server.tool(name=models.name, description=models.description)
    async def list_research_models() -> str:
        return _unwrap(await dispatcher.dispatch(models.name, {}))

    return server


def main() -> None:
    """Entry point for MCP server."""
    try:
        server = serve()
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    transport = settings.server.transport
    try:
        if transport == "stdio":
            logger.info(f"Starting MCP deep research server on stdio (agent: {settings.gemini.agent})")
            server.run()
        elif transport in ("streamable-http", "sse"):
            logger.info(f"Starting MCP deep research server at http://{settings.server.host}:{settings.server.port}/mcp")
            server.run(transport=transport, host=settings.server.host, port=settings.server.port)
        else:
            raise ValueError(f"Unknown transport: {transport}")
    except Exception as e:
        print(f"fatal error: failed to start {transport} transport: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
