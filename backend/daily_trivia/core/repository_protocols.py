"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE their results are never async themselves —
      the services orchestrate the async calls around the pure logic
    - Stored questions cross the boundary as dicts: keeps services free of ORM types
"""

from typing import Protocol

from daily_trivia.core.domain_types import (
    Candidate, Embedding, GradeResult, QuestionId,
)


class QuestionStore(Protocol):
    """Contract for question/answer persistence — implemented by shell.

    Every method raises DatabaseError on infrastructure failure.
    """
    async def exists_by_fingerprint(self, sha256: str) -> bool: ...
    async def exists_by_signature(self, signature: str) -> bool: ...
    async def has_choice_overlap(self, normalized_choices: list[str]) -> bool: ...
    async def max_similarity(self, embedding: Embedding) -> float: ...
    async def insert_question(self, fields: dict) -> dict: ...
    async def insert_answer(self, fields: dict) -> None: ...
    async def latest_question(self) -> dict | None: ...
    async def get_question(self, question_id: QuestionId) -> dict | None: ...


class QuestionGenerator(Protocol):
    """Produces one candidate question. Raises ExternalServiceError on failure."""
    async def generate(self) -> Candidate: ...


class TextEmbedder(Protocol):
    """Embeds text. Raises ExternalServiceError on failure or empty result."""
    async def embed(self, text: str) -> Embedding: ...


class AnswerGrader(Protocol):
    """Semantic answer check. Raises MalformedResponseError on unparseable replies."""
    async def grade(
        self,
        answer: str,
        choices: list[str] | None,
        question_text: str | None = None,
    ) -> GradeResult: ...
