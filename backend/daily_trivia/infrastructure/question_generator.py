"""Question Generator — asks Claude for one trivia question as strict JSON.

Invariants:
    - generate() returns a Candidate or raises ExternalServiceError
    - Wrong-typed fields raise MalformedResponseError; missing strings become ""
    - No validation of length or novelty here (that is the orchestrator's job)

Design Decisions:
    - Temperature 0.7: variety across attempts without losing factual focus
    - Choices are aliases of ONE answer, not multiple-choice distractors
"""

import logging

from daily_trivia.core.domain_types import Candidate
from daily_trivia.core.errors import MalformedResponseError
from daily_trivia.infrastructure.anthropic_client import ResilientAnthropicClient
from daily_trivia.infrastructure.llm_json import extract_json_object, response_text

logger = logging.getLogger(__name__)

SERVICE_NAME = "Question generator"

_SYSTEM_PROMPT = (
    "You generate a single factual trivia question as strict JSON. "
    "The question must be specific, factual, and verifiable (no opinions). "
    "Avoid yes/no. Question text length ~100-160 chars. "
    'Output ONLY strict JSON with fields: {"title", "text", "topic", "choices"}. '
    'The "choices" array must contain 1-5 direct aliases or exact surface forms '
    "for the correct answer. Each choice should be 1-3 words, contain no "
    'descriptions or roles (e.g., avoid "first female UK PM"), and only include '
    "valid synonyms, alternate spellings, or common epithets. "
    "Do not include any prose or Markdown."
)

_USER_PROMPT = (
    "Create a novel, accurate trivia question (history, science, geography, "
    "arts, or technology). Ensure the choices array contains only the explicit "
    "answer name and its close aliases; if no aliases exist, repeat the "
    "canonical name once."
)


def candidate_from_payload(data: dict) -> Candidate:
    """Map parsed JSON to a Candidate, rejecting wrong-typed fields."""
    fields = {}
    for key in ("title", "text", "topic"):
        value = data.get(key) or ""
        if not isinstance(value, str):
            raise MalformedResponseError(f"Field '{key}' is not a string", SERVICE_NAME)
        fields[key] = value

    choices = data.get("choices") or []
    if not isinstance(choices, list) or not all(isinstance(c, str) for c in choices):
        raise MalformedResponseError("Field 'choices' is not a list of strings", SERVICE_NAME)
    return Candidate(choices=choices, **fields)


class AnthropicQuestionGenerator:
    """QuestionGenerator backed by the Anthropic Messages API."""

    def __init__(
        self,
        client: ResilientAnthropicClient,
        model: str,
        max_tokens: int = 512,
        temperature: float = 0.7,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self) -> Candidate:
        response = await self.client.create_message(
            model=self.model,
            max_tokens=self.max_tokens,
            system=_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": _USER_PROMPT}],
            temperature=self.temperature,
        )
        data = extract_json_object(response_text(response), SERVICE_NAME)
        candidate = candidate_from_payload(data)
        logger.info(f"Candidate received (topic: {candidate.topic})")
        return candidate
