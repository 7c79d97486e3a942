"""Novelty Gate — decides whether a candidate question duplicates a stored one.

Invariants:
    - Checks run in fixed order, each an early exit:
      choice overlap → choice signature → content hash → semantic similarity
    - The embedder is awaited only after every deterministic check passed
    - Empty normalized choice set / empty signature skip their lookups
    - similarity >= threshold is a duplicate (the threshold itself is rejected)

Design Decisions:
    - Cheap indexed lookups before the embedding call + nearest-neighbour scan:
      regenerated near-identical text never costs an external call
    - Embedding errors propagate from check(): the orchestrator turns them into
      an attempt outcome, the gate itself has no retry policy
    - The overlap rule is global (any shared choice with any stored question);
      see DESIGN.md for the open product question
"""

import logging
from collections.abc import Awaitable, Callable

from daily_trivia.core.domain_types import DuplicateReason, Embedding, NoveltyVerdict
from daily_trivia.core.normalize import (
    choice_signature,
    content_fingerprint,
    normalized_choice_set,
)
from daily_trivia.core.repository_protocols import QuestionStore

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD: float = 0.6


class NoveltyGate:
    """Layered duplicate detection against the question store."""

    def __init__(
        self, store: QuestionStore, threshold: float = SIMILARITY_THRESHOLD,
    ):
        self.store = store
        self.threshold = threshold

    async def check(
        self,
        text: str,
        choices: list[str],
        embed: Callable[[str], Awaitable[Embedding]],
    ) -> NoveltyVerdict:
        """Full gate. embed(text) is only called if the deterministic checks pass."""
        verdict = await self.check_deterministic(text, choices)
        if verdict is not None:
            return verdict
        embedding = await embed(text)
        return await self.check_semantic(embedding)

    async def check_deterministic(
        self, text: str, choices: list[str],
    ) -> NoveltyVerdict | None:
        """Overlap, signature and hash lookups. None means no collision found."""
        normalized = normalized_choice_set(choices)
        if normalized and await self.store.has_choice_overlap(normalized):
            logger.info("Duplicate choices overlap detected")
            return NoveltyVerdict(
                duplicate=True, reason=DuplicateReason.CHOICE_OVERLAP,
            )

        signature = choice_signature(choices)
        if signature and await self.store.exists_by_signature(signature):
            logger.info("Duplicate choice signature detected")
            return NoveltyVerdict(
                duplicate=True, reason=DuplicateReason.SIGNATURE_COLLISION,
            )

        if await self.store.exists_by_fingerprint(content_fingerprint(text)):
            logger.info("Duplicate content hash detected")
            return NoveltyVerdict(
                duplicate=True, reason=DuplicateReason.HASH_COLLISION,
            )
        return None

    async def check_semantic(self, embedding: Embedding) -> NoveltyVerdict:
        """Nearest stored question by cosine similarity against the threshold."""
        similarity = await self.store.max_similarity(embedding)
        if similarity >= self.threshold:
            logger.info(
                f"Too similar to a stored question: sim={similarity:.3f}",
                extra={"similarity": round(similarity, 3)},
            )
            return NoveltyVerdict(
                duplicate=True,
                reason=DuplicateReason.SEMANTIC_DUPLICATE,
                similarity=similarity,
                embedding=embedding,
            )
        return NoveltyVerdict(
            duplicate=False, similarity=similarity, embedding=embedding,
        )
