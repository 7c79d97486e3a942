"""Answer Grader — asks Claude whether a free-text answer names an accepted choice.

Invariants:
    - grade() returns a GradeResult or raises ExternalServiceError
    - "match" must be a JSON boolean; anything else is a MalformedResponseError
    - Identical inputs always produce an identical request payload (safe to retry)

Design Decisions:
    - Temperature 0: grading should be as repeatable as the model allows
    - The prompt asks for matched_choice verbatim; the orchestrator still
      re-validates it against the canonical list
    - Open-ended questions (no choices) send the question text instead
"""

import json
import logging

from daily_trivia.core.domain_types import GradeResult
from daily_trivia.core.errors import MalformedResponseError
from daily_trivia.infrastructure.anthropic_client import ResilientAnthropicClient
from daily_trivia.infrastructure.llm_json import extract_json_object, response_text

logger = logging.getLogger(__name__)

SERVICE_NAME = "Answer grader"

_CHOICES_SYSTEM_PROMPT = (
    "You verify if a response matches any exact item in a provided list of "
    "acceptable answers. Only acknowledge exact equivalence, never approximate "
    "matches. Return strict JSON only."
)

_CHOICES_INSTRUCTIONS = (
    "Return match=true only if the answer clearly references the same entity as "
    "one of the choices (allowing spelling/spacing variants). When match=true, set "
    "matched_choice to the exact string from the choices array. Reject other "
    "entities even if similar. Always provide a short reason."
)

_OPEN_SYSTEM_PROMPT = (
    "You judge whether a response correctly answers a factual trivia question. "
    "Be strict: vague, partial, or hedged answers are not correct. "
    "Return strict JSON only."
)

_OPEN_INSTRUCTIONS = (
    "Return match=true only if the answer is factually correct for the question. "
    "Leave matched_choice empty. Always provide a short reason."
)

_OUTPUT_FORMAT = {"match": False, "matched_choice": "", "reason": ""}


def build_grade_request(
    answer: str, choices: list[str] | None, question_text: str | None,
) -> tuple[str, str]:
    """(system prompt, user message) for one grading call. Pure."""
    if choices:
        payload = {
            "answer": answer,
            "choices": choices,
            "instructions": _CHOICES_INSTRUCTIONS,
            "output_format": _OUTPUT_FORMAT,
        }
        return _CHOICES_SYSTEM_PROMPT, json.dumps(payload, ensure_ascii=False)
    payload = {
        "question": question_text or "",
        "answer": answer,
        "instructions": _OPEN_INSTRUCTIONS,
        "output_format": _OUTPUT_FORMAT,
    }
    return _OPEN_SYSTEM_PROMPT, json.dumps(payload, ensure_ascii=False)


def grade_from_payload(data: dict) -> GradeResult:
    match = data.get("match")
    if not isinstance(match, bool):
        raise MalformedResponseError("Field 'match' is not a boolean", SERVICE_NAME)
    reason = data.get("reason") or ""
    matched_choice = data.get("matched_choice") or ""
    if not isinstance(reason, str) or not isinstance(matched_choice, str):
        raise MalformedResponseError("Fields 'reason'/'matched_choice' must be strings", SERVICE_NAME)
    return GradeResult(match=match, reason=reason.strip(), matched_choice=matched_choice)


class AnthropicAnswerGrader:
    """AnswerGrader backed by the Anthropic Messages API."""

    def __init__(
        self, client: ResilientAnthropicClient, model: str, max_tokens: int = 256,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def grade(
        self,
        answer: str,
        choices: list[str] | None,
        question_text: str | None = None,
    ) -> GradeResult:
        system, user = build_grade_request(answer, choices, question_text)
        response = await self.client.create_message(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
            temperature=0.0,
        )
        data = extract_json_object(response_text(response), SERVICE_NAME)
        result = grade_from_payload(data)
        logger.info(
            "Grader verdict",
            extra={"outcome": "match" if result.match else "no_match"},
        )
        return result
