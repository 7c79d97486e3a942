"""OpenAI embedder adapter — tests for vector extraction and error mapping."""

import httpx
import openai
import pytest

from daily_trivia.core.errors import EmbeddingAPIError
from daily_trivia.infrastructure.openai_embedder import OpenAIEmbedder

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/embeddings")


class _Item:
    def __init__(self, embedding):
        self.embedding = embedding


class _Response:
    def __init__(self, data):
        self.data = data


class _Embeddings:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class _FakeOpenAI:
    def __init__(self, outcome):
        self.embeddings = _Embeddings(outcome)


def _embedder(outcome) -> tuple[OpenAIEmbedder, _FakeOpenAI]:
    client = _FakeOpenAI(outcome)
    return OpenAIEmbedder("sk-test", model="embed-test", client=client), client


@pytest.mark.asyncio
async def test_returns_first_vector_as_floats():
    embedder, client = _embedder(_Response([_Item([1, 0.5, -2])]))
    vector = await embedder.embed("What is the capital of France?")
    assert vector == [1.0, 0.5, -2.0]
    assert client.embeddings.calls == [
        {"input": "What is the capital of France?", "model": "embed-test"},
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [_Response([]), _Response([_Item([])])])
async def test_empty_result_raises(response):
    embedder, _ = _embedder(response)
    with pytest.raises(EmbeddingAPIError) as exc_info:
        await embedder.embed("text")
    assert exc_info.value.api_error_type == "empty_result"


@pytest.mark.asyncio
@pytest.mark.parametrize("error, error_type", [
    (openai.APITimeoutError(request=_REQUEST), "timeout"),
    (openai.APIConnectionError(request=_REQUEST), "connection_error"),
    (
        openai.APIStatusError(
            "server error",
            response=httpx.Response(500, request=_REQUEST),
            body=None,
        ),
        "status_error",
    ),
])
async def test_sdk_errors_mapped(error, error_type):
    embedder, _ = _embedder(error)
    with pytest.raises(EmbeddingAPIError) as exc_info:
        await embedder.embed("text")
    assert exc_info.value.api_error_type == error_type
    assert exc_info.value.http_status == 502
