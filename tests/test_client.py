"""Tests for the GenAI client adapter: error kinds, snapshots and grounding extraction."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google.genai import errors
from google.genai._gaos.lib import compat_errors as interaction_errors

from mcp_server_deep_research.client import ResearchClient, extract_web_sources
from mcp_server_deep_research.exceptions import ConfigurationError, ErrorKind, ResearchClientError


def _api_error(cls, code: int, status: str):
    return cls(code, {"error": {"code": code, "message": f"{status} message", "status": status}})


INTERACTIONS_URL = "https://generativelanguage.googleapis.com/v1beta/interactions"


def _status_error(cls, code: int):
    response = httpx.Response(code, json={"error": {"code": code}}, request=httpx.Request("GET", INTERACTIONS_URL))
    return cls(f"Error code: {code}", response=response, body={"error": {"code": code}})


@pytest.fixture
def genai_client() -> MagicMock:
    client = MagicMock()
    client.aio.interactions.create = AsyncMock()
    client.aio.interactions.get = AsyncMock()
    client.aio.models.generate_content = AsyncMock()
    return client


@pytest.fixture
def research_client(genai_client) -> ResearchClient:
    return ResearchClient(agent="agent-x", model="model-y", genai_client=genai_client)


class TestConstruction:
    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            ResearchClient(api_key=None)


class TestCreateInteraction:
    @pytest.mark.anyio
    async def test_background_request(self, research_client, genai_client):
        genai_client.aio.interactions.create.return_value = SimpleNamespace(id="interaction-1")

        task_id = await research_client.create_interaction("fusion energy timeline")

        assert task_id == "interaction-1"
        genai_client.aio.interactions.create.assert_awaited_once_with(agent="agent-x", input="fusion energy timeline", background=True)

    @pytest.mark.anyio
    async def test_missing_id_is_malformed(self, research_client, genai_client):
        genai_client.aio.interactions.create.return_value = SimpleNamespace(id=None)

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.create_interaction("q")
        assert exc_info.value.kind is ErrorKind.MALFORMED_RESPONSE

    @pytest.mark.anyio
    async def test_auth_error_is_api_kind(self, research_client, genai_client):
        genai_client.aio.interactions.create.side_effect = _status_error(interaction_errors.AuthenticationError, 401)

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.create_interaction("q")
        assert exc_info.value.kind is ErrorKind.API

    @pytest.mark.anyio
    async def test_network_error_is_transport(self, research_client, genai_client):
        genai_client.aio.interactions.create.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.create_interaction("q")
        assert exc_info.value.kind is ErrorKind.TRANSPORT
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.anyio
    async def test_sdk_connection_error_is_transport(self, research_client, genai_client):
        request = httpx.Request("POST", INTERACTIONS_URL)
        genai_client.aio.interactions.create.side_effect = interaction_errors.APIConnectionError(request=request)

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.create_interaction("q")
        assert exc_info.value.kind is ErrorKind.TRANSPORT

    @pytest.mark.anyio
    async def test_sdk_timeout_is_transport(self, research_client, genai_client):
        genai_client.aio.interactions.create.side_effect = interaction_errors.APITimeoutError(httpx.Request("POST", INTERACTIONS_URL))

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.create_interaction("q")
        assert exc_info.value.kind is ErrorKind.TRANSPORT


class TestGetInteraction:
    @pytest.mark.anyio
    async def test_snapshot(self, research_client, genai_client):
        genai_client.aio.interactions.get.return_value = SimpleNamespace(
            id="i-1",
            status="completed",
            outputs=[SimpleNamespace(text="A"), SimpleNamespace(type="thought"), {"text": "B"}],
            error=None,
        )

        snapshot = await research_client.get_interaction("i-1")

        genai_client.aio.interactions.get.assert_awaited_once_with("i-1")
        assert snapshot.status == "completed"
        assert snapshot.outputs == ["A", None, "B"]
        assert snapshot.error is None

    @pytest.mark.anyio
    async def test_missing_outputs(self, research_client, genai_client):
        genai_client.aio.interactions.get.return_value = SimpleNamespace(id="i-1", status="in_progress")

        snapshot = await research_client.get_interaction("i-1")

        assert snapshot.outputs == []
        assert snapshot.error is None

    @pytest.mark.anyio
    async def test_404_is_not_found(self, research_client, genai_client):
        genai_client.aio.interactions.get.side_effect = _status_error(interaction_errors.NotFoundError, 404)

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.get_interaction("missing")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.anyio
    async def test_server_error_is_transport(self, research_client, genai_client):
        genai_client.aio.interactions.get.side_effect = _status_error(interaction_errors.InternalServerError, 503)

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.get_interaction("i-1")
        assert exc_info.value.kind is ErrorKind.TRANSPORT


class TestGenerateGrounded:
    @pytest.mark.anyio
    async def test_request_config(self, research_client, genai_client):
        genai_client.aio.models.generate_content.return_value = SimpleNamespace(text="answer", candidates=[])

        answer = await research_client.generate_grounded("prompt", 0.7)

        assert answer.text == "answer"
        assert answer.sources == []
        kwargs = genai_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "model-y"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].temperature == 0.7
        assert kwargs["config"].tools[0].google_search is not None

    @pytest.mark.anyio
    async def test_model_not_found(self, research_client, genai_client):
        genai_client.aio.models.generate_content.side_effect = _api_error(errors.ClientError, 404, "NOT_FOUND")

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.generate_grounded("prompt", 0.7)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.anyio
    async def test_model_unavailable_is_transport(self, research_client, genai_client):
        genai_client.aio.models.generate_content.side_effect = _api_error(errors.ServerError, 503, "UNAVAILABLE")

        with pytest.raises(ResearchClientError) as exc_info:
            await research_client.generate_grounded("prompt", 0.7)
        assert exc_info.value.kind is ErrorKind.TRANSPORT


def _chunk(**kwargs):
    return SimpleNamespace(web=None, **kwargs) if "web" not in kwargs else SimpleNamespace(**kwargs)


class TestExtractWebSources:
    def test_no_candidates(self):
        assert extract_web_sources(SimpleNamespace(candidates=None)) == []

    def test_no_grounding_metadata(self):
        response = SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=None)])
        assert extract_web_sources(response) == []

    def test_non_web_chunks_skipped(self):
        chunks = [_chunk(web=SimpleNamespace(title="T", uri="U")), _chunk(retrieved_context=SimpleNamespace(uri="x"))]
        response = SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))])

        sources = extract_web_sources(response)

        assert [s.to_dict() for s in sources] == [{"title": "T", "uri": "U"}]

    def test_missing_title_and_uri_default_to_empty(self):
        chunks = [_chunk(web=SimpleNamespace(title=None, uri=None))]
        response = SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))])

        assert [s.to_dict() for s in extract_web_sources(response)] == [{"title": "", "uri": ""}]

    def test_only_first_candidate(self):
        first = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=[]))
        second = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=[_chunk(web=SimpleNamespace(title="T", uri="U"))]))

        assert extract_web_sources(SimpleNamespace(candidates=[first, second])) == []


class TestInteractionErrorsThroughDispatch:
    """Interactions API failures come back as handler payloads, not error envelopes."""

    @pytest.fixture
    def dispatcher(self, research_client):
        from mcp_server_deep_research.dispatch import ToolDispatcher
        from mcp_server_deep_research.handlers import ResearchHandlers

        return ToolDispatcher(ResearchHandlers(research_client))

    @pytest.mark.anyio
    async def test_status_not_found(self, dispatcher, genai_client):
        genai_client.aio.interactions.get.side_effect = _status_error(interaction_errors.NotFoundError, 404)

        response = await dispatcher.dispatch("get_research_status", {"task_id": "missing"})

        assert not response.is_error
        payload = json.loads(response.text)
        assert payload["task_id"] == "missing"
        assert payload["status"] == "error"
        assert "not_found" in payload["error"]

    @pytest.mark.anyio
    async def test_start_not_found(self, dispatcher, genai_client):
        genai_client.aio.interactions.create.side_effect = _status_error(interaction_errors.NotFoundError, 404)

        response = await dispatcher.dispatch("start_research", {"query": "q"})

        assert not response.is_error
        payload = json.loads(response.text)
        assert payload["task_id"] is None
        assert payload["status"] == "error"
        assert "404" in payload["message"]
