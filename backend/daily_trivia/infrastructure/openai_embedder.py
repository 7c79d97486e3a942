"""OpenAI Embedder — text → embedding vector via the OpenAI embeddings API.

Invariants:
    - embed() returns a non-empty list of floats or raises EmbeddingAPIError
    - No retries here: a failed embedding costs one generation attempt

Design Decisions:
    - AsyncOpenAI with SDK retries disabled: the generation loop is the retry policy
    - Client injectable for tests (no network in the suite)
"""

import logging

import openai
from openai import AsyncOpenAI

from daily_trivia.core.domain_types import Embedding
from daily_trivia.core.errors import EmbeddingAPIError

logger = logging.getLogger(__name__)

DEFAULT_EMBED_MODEL = "text-embedding-3-small"


class OpenAIEmbedder:
    """TextEmbedder backed by OpenAI embeddings."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_EMBED_MODEL,
        timeout_seconds: int = 20,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        self.client = client or AsyncOpenAI(
            api_key=api_key, timeout=timeout_seconds, max_retries=0,
        )

    async def embed(self, text: str) -> Embedding:
        try:
            response = await self.client.embeddings.create(
                input=text, model=self.model,
            )
        except openai.APITimeoutError:
            raise EmbeddingAPIError("API timeout", "timeout")
        except openai.APIConnectionError as e:
            raise EmbeddingAPIError(str(e), "connection_error")
        except openai.APIStatusError as e:
            raise EmbeddingAPIError(f"status {e.status_code}", "status_error")
        except openai.OpenAIError as e:
            raise EmbeddingAPIError(str(e), "unknown")

        if not response.data or not response.data[0].embedding:
            raise EmbeddingAPIError("No embedding returned", "empty_result")
        return [float(x) for x in response.data[0].embedding]
