"""Generation Orchestrator — bounded retry loop from LLM candidate to stored question.

Invariants:
    - At most max_attempts sequential attempts per call (default 5)
    - Every attempt ends in exactly one AttemptOutcome
    - Generator/embedder failures cost an attempt; they never abort the loop
    - DatabaseError aborts the whole call immediately (infrastructure, not flakiness)
    - At most one question is persisted per call, in one store write
    - Exhaustion raises GenerationExhaustedError (expected outcome, HTTP 409)

Design Decisions:
    - Attempts are sequential, never parallel: each attempt's duplicate checks must
      see the store as the previous attempts left it, and speculative candidates
      would need dedup against each other
    - run_attempt() is public so the retry policy is testable one step at a time
    - The embedding is requested only after the deterministic checks pass
"""

import logging
from dataclasses import dataclass, field

from daily_trivia.core.domain_types import (
    AttemptOutcome, Candidate, DUPLICATE_OUTCOMES, Embedding,
)
from daily_trivia.core.errors import ExternalServiceError, GenerationExhaustedError
from daily_trivia.core.normalize import (
    choice_signature,
    content_fingerprint,
    normalized_choice_set,
)
from daily_trivia.core.repository_protocols import (
    QuestionGenerator, QuestionStore, TextEmbedder,
)
from daily_trivia.core.validate_candidate import (
    sanitize_choices,
    validate_candidate_shape,
)
from daily_trivia.services.novelty_gate import NoveltyGate, SIMILARITY_THRESHOLD

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS: int = 5


@dataclass
class AttemptResult:
    """Outcome of one attempt; question is set only when accepted."""
    outcome: AttemptOutcome
    question: dict | None = None
    similarity: float = 0.0


@dataclass
class GenerationResult:
    """Accepted question plus what it took to get there."""
    question: dict
    similarity: float
    attempts: int
    outcomes: list[AttemptOutcome] = field(default_factory=list)


def build_question_fields(
    candidate: Candidate, choices: list[str], embedding: Embedding,
) -> dict:
    """Store payload for an accepted candidate. Pure."""
    signature = choice_signature(choices)
    return {
        "title": candidate.title,
        "text": candidate.text,
        "topic": candidate.topic,
        "sha256": content_fingerprint(candidate.text),
        "choices": list(choices),
        "choices_normalized": normalized_choice_set(choices),
        "choices_signature": signature or None,
        "embedding": list(embedding),
    }


class GenerationOrchestrator:
    """Drives generator → validation → novelty gate → store."""

    def __init__(
        self,
        store: QuestionStore,
        generator: QuestionGenerator,
        embedder: TextEmbedder,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
        similarity_threshold: float = SIMILARITY_THRESHOLD,
    ):
        self.store = store
        self.generator = generator
        self.embedder = embedder
        self.max_attempts = max_attempts
        self.gate = NoveltyGate(store, similarity_threshold)

    async def generate(self) -> GenerationResult:
        """Run attempts until one is accepted or the budget is spent."""
        outcomes: list[AttemptOutcome] = []
        for attempt in range(1, self.max_attempts + 1):
            logger.info(
                f"Generation attempt {attempt}/{self.max_attempts}",
                extra={"attempt": attempt},
            )
            result = await self.run_attempt(attempt)
            outcomes.append(result.outcome)
            if result.outcome is AttemptOutcome.ACCEPTED and result.question:
                logger.info(
                    f"Inserted question id={result.question['id']} "
                    f"sim={result.similarity:.3f}",
                    extra={
                        "attempt": attempt,
                        "question_id": str(result.question["id"]),
                        "similarity": round(result.similarity, 3),
                    },
                )
                return GenerationResult(
                    question=result.question,
                    similarity=result.similarity,
                    attempts=attempt,
                    outcomes=outcomes,
                )
            logger.info(
                f"Attempt {attempt} rejected: {result.outcome.value}",
                extra={"attempt": attempt, "outcome": result.outcome.value},
            )

        logger.warning(f"Generation failed after {self.max_attempts} attempts")
        raise GenerationExhaustedError(
            self.max_attempts, [o.value for o in outcomes],
        )

    async def run_attempt(self, attempt: int) -> AttemptResult:
        """One pass: fetch, validate, sanitize, gate, persist."""
        try:
            candidate = await self.generator.generate()
        except ExternalServiceError as e:
            logger.warning(
                f"Generator error: {e.message}",
                extra={"attempt": attempt, "error_code": e.code},
            )
            return AttemptResult(AttemptOutcome.GENERATOR_FAILED)

        # ── PURE: shape + sanitization ──
        error = validate_candidate_shape(candidate)
        if error:
            logger.info(error["message"], extra={"attempt": attempt})
            return AttemptResult(AttemptOutcome.VALIDATION_FAILED)

        choices = sanitize_choices(candidate.text, candidate.choices)
        if not choices:
            logger.info(
                "Choices rejected after sanitization", extra={"attempt": attempt},
            )
            return AttemptResult(AttemptOutcome.VALIDATION_FAILED)

        # ── IMPURE: novelty lookups (DatabaseError propagates) ──
        verdict = await self.gate.check_deterministic(candidate.text, choices)
        if verdict is not None and verdict.reason is not None:
            return AttemptResult(DUPLICATE_OUTCOMES[verdict.reason])

        try:
            embedding = await self.embedder.embed(candidate.text)
        except ExternalServiceError as e:
            logger.warning(
                f"Embed error: {e.message}",
                extra={"attempt": attempt, "error_code": e.code},
            )
            return AttemptResult(AttemptOutcome.EMBED_FAILED)
        if not embedding:
            logger.warning("Embed empty result", extra={"attempt": attempt})
            return AttemptResult(AttemptOutcome.EMBED_FAILED)

        verdict = await self.gate.check_semantic(embedding)
        if verdict.duplicate:
            return AttemptResult(
                AttemptOutcome.DUPLICATE_SIMILARITY, similarity=verdict.similarity,
            )

        question = await self.store.insert_question(
            build_question_fields(candidate, choices, embedding),
        )
        return AttemptResult(
            AttemptOutcome.ACCEPTED, question=question, similarity=verdict.similarity,
        )
