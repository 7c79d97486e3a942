"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - QuestionId wraps UUIDs — never use bare UUID in domain logic
    - Score is binary today: ACCEPTED_SCORE or REJECTED_SCORE
    - Every generation attempt ends in exactly one AttemptOutcome
    - Candidate and GradeResult are transient — never persisted as-is

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log extras without custom encoders
    - Frozen dataclasses for value objects: a candidate cannot drift mid-attempt
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

QuestionId = NewType("QuestionId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Embedding = list[float]

ACCEPTED_SCORE: int = 10
REJECTED_SCORE: int = 0


# ─── Enums ───────────────────────────────────────────────────────

class DuplicateReason(str, Enum):
    """Why the novelty gate rejected a candidate."""
    CHOICE_OVERLAP = "choice_overlap"
    SIGNATURE_COLLISION = "signature_collision"
    HASH_COLLISION = "hash_collision"
    SEMANTIC_DUPLICATE = "semantic_duplicate"


class AttemptOutcome(str, Enum):
    """Exit reason of one generation attempt."""
    GENERATOR_FAILED = "generator_failed"
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_OVERLAP = "duplicate_overlap"
    DUPLICATE_SIGNATURE = "duplicate_signature"
    DUPLICATE_HASH = "duplicate_hash"
    EMBED_FAILED = "embed_failed"
    DUPLICATE_SIMILARITY = "duplicate_similarity"
    ACCEPTED = "accepted"


class GradeSource(str, Enum):
    """Which layer decided the grade."""
    CHOICE_MATCH = "choice_match"
    GRADER = "grader"


DUPLICATE_OUTCOMES: dict[DuplicateReason, AttemptOutcome] = {
    DuplicateReason.CHOICE_OVERLAP: AttemptOutcome.DUPLICATE_OVERLAP,
    DuplicateReason.SIGNATURE_COLLISION: AttemptOutcome.DUPLICATE_SIGNATURE,
    DuplicateReason.HASH_COLLISION: AttemptOutcome.DUPLICATE_HASH,
    DuplicateReason.SEMANTIC_DUPLICATE: AttemptOutcome.DUPLICATE_SIMILARITY,
}


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class Candidate:
    """A freshly generated question, not yet validated or stored."""
    title: str
    text: str
    topic: str
    choices: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GradeResult:
    """Grader verdict. matched_choice is a claim, not a fact."""
    match: bool
    reason: str = ""
    matched_choice: str = ""


@dataclass(frozen=True)
class NoveltyVerdict:
    """Novelty gate result. similarity is only meaningful once the semantic check ran."""
    duplicate: bool
    reason: DuplicateReason | None = None
    similarity: float = 0.0
    embedding: Embedding | None = None

    @property
    def novel(self) -> bool:
        return not self.duplicate
