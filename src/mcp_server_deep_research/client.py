"""Thin adapter around the Google GenAI SDK (Interactions API and grounded generation)."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
from google import genai
from google.genai import errors, types
from google.genai._gaos.lib import compat_errors as interaction_errors
from pydantic import ValidationError

from .config import DEFAULT_AGENT, DEFAULT_MODEL
from .exceptions import ConfigurationError, ErrorKind, ResearchClientError
from .models import GroundedAnswer, InteractionSnapshot, ResearchSource

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Convert SDK and network failures into ResearchClientError."""
    try:
        yield
    except ResearchClientError:
        raise
    except interaction_errors.APIResponseValidationError as e:
        logger.warning(f"{operation} returned a malformed response: {e}")
        raise ResearchClientError(ErrorKind.MALFORMED_RESPONSE, str(e)) from e
    except interaction_errors.APIConnectionError as e:
        logger.warning(f"{operation} transport failure: {e}")
        raise ResearchClientError(ErrorKind.TRANSPORT, str(e)) from e
    except interaction_errors.APIError as e:
        # Interactions API errors; status_code is None when no response arrived
        status_code = e.status_code
        if status_code == 404:
            kind = ErrorKind.NOT_FOUND
        elif status_code is None or status_code >= 500:
            kind = ErrorKind.TRANSPORT
        else:
            kind = ErrorKind.API
        logger.warning(f"{operation} rejected by API ({status_code}): {e}")
        raise ResearchClientError(kind, str(e)) from e
    except errors.APIError as e:
        if e.code == 404:
            kind = ErrorKind.NOT_FOUND
        elif isinstance(e, errors.ServerError):
            kind = ErrorKind.TRANSPORT
        else:
            kind = ErrorKind.API
        logger.warning(f"{operation} rejected by API ({e.code}): {e}")
        raise ResearchClientError(kind, str(e)) from e
    except (httpx.HTTPError, OSError, TimeoutError) as e:
        logger.warning(f"{operation} transport failure: {e}")
        raise ResearchClientError(ErrorKind.TRANSPORT, str(e) or type(e).__name__) from e
    except (ValidationError, AttributeError, TypeError) as e:
        logger.warning(f"{operation} returned a malformed response: {e}")
        raise ResearchClientError(ErrorKind.MALFORMED_RESPONSE, str(e)) from e


def extract_web_sources(response: Any) -> list[ResearchSource]:
    """Collect web citations from the first candidate's grounding metadata.

    Chunks without a ``web`` entry are skipped; missing titles and URIs
    default to empty strings.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources: list[ResearchSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if not web:
            continue
        sources.append(ResearchSource(title=getattr(web, "title", None) or "", uri=getattr(web, "uri", None) or ""))
    return sources


def _output_text(output: Any) -> str | None:
    if isinstance(output, dict):
        return output.get("text")
    return getattr(output, "text", None)


class ResearchClient:
    """Calls the deep research agent and the grounded model through one genai client."""

    def __init__(
        self,
        api_key: str | None = None,
        agent: str = DEFAULT_AGENT,
        model: str = DEFAULT_MODEL,
        genai_client: genai.Client | None = None,
    ):
        if genai_client is None:
            if not api_key:
                raise ConfigurationError("GEMINI_API_KEY environment variable is required")
            genai_client = genai.Client(api_key=api_key)
        self._client = genai_client
        self.agent = agent
        self.model = model

    async def create_interaction(self, query: str) -> str:
        """Start a background research interaction and return its id."""
        with _translate_errors("create_interaction"):
            interaction = await self._client.aio.interactions.create(
                agent=self.agent,
                input=query,
                background=True,
            )
            interaction_id = getattr(interaction, "id", None)
            if not interaction_id:
                raise ResearchClientError(ErrorKind.MALFORMED_RESPONSE, "interaction response has no id")
        logger.debug(f"Created interaction {interaction_id} with agent {self.agent}")
        return interaction_id

    async def get_interaction(self, task_id: str) -> InteractionSnapshot:
        """Fetch an interaction once by id."""
        with _translate_errors("get_interaction"):
            interaction = await self._client.aio.interactions.get(task_id)
            outputs = getattr(interaction, "outputs", None) or []
            return InteractionSnapshot(
                id=getattr(interaction, "id", None) or task_id,
                status=getattr(interaction, "status", None),
                outputs=[_output_text(output) for output in outputs],
                error=getattr(interaction, "error", None),
            )

    async def generate_grounded(self, prompt: str, temperature: float) -> GroundedAnswer:
        """Run one generation with Google Search grounding enabled."""
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
            temperature=temperature,
        )
        with _translate_errors("generate_grounded"):
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
            return GroundedAnswer(text=response.text, sources=extract_web_sources(response))
