"""CLI interface for the deep research MCP server."""

import asyncio
from typing import Any

import typer

from .config import CONFIG_FILE, settings
from .exceptions import ConfigurationError
from .tools import ResearchTool

app = typer.Typer(help="Gemini Deep Research from the command line")


def _call(tool: ResearchTool, arguments: dict[str, Any]) -> None:
    """Run one tool through the dispatcher and print its JSON payload."""
    from .server import build_client, build_dispatcher

    try:
        dispatcher = build_dispatcher(build_client())
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    response = asyncio.run(dispatcher.dispatch(tool.value, arguments))
    typer.echo(response.text)
    if response.is_error:
        raise typer.Exit(code=1)


@app.command()
def server() -> None:
    """Run the MCP server on the configured transport."""
    from .server import main

    main()


@app.command()
def start(query: str = typer.Argument(..., help="Research question or topic")) -> None:
    """Start a background deep research task."""
    _call(ResearchTool.START_RESEARCH, {"query": query})


@app.command()
def status(task_id: str = typer.Argument(..., help="Task id returned by 'start'")) -> None:
    """Check a research task once."""
    _call(ResearchTool.GET_RESEARCH_STATUS, {"task_id": task_id})


@app.command()
def ask(query: str = typer.Argument(..., help="Question to answer with Google Search grounding")) -> None:
    """Quick grounded answer with sources."""
    _call(ResearchTool.RESEARCH_WITH_SOURCES, {"query": query})


@app.command()
def models() -> None:
    """List the research agent and grounded model."""
    _call(ResearchTool.LIST_RESEARCH_MODELS, {})


@app.command()
def config(save: bool = typer.Option(False, "--save", help="Persist current settings to the config file")) -> None:
    """Show current configuration."""
    typer.echo(f"Agent: {settings.gemini.agent}")
    typer.echo(f"Model: {settings.gemini.model}")
    typer.echo(f"Temperature: {settings.gemini.temperature}")
    typer.echo(f"API key: {'(set)' if settings.gemini.get_api_key() else '(missing)'}")
    typer.echo(f"Transport: {settings.server.transport}")
    typer.echo(f"Config file: {CONFIG_FILE}")
    if save:
        path = settings.save()
        typer.echo(f"Saved to {path}")


if __name__ == "__main__":
    app()
