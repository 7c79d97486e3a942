"""Candidate Validation — shape checks and choice sanitization for generated questions.

Invariants:
    - Pure: returns values or error descriptors, never raises, never mutates input
    - Body text length must be within [MIN_TEXT_LENGTH, MAX_TEXT_LENGTH]
    - title, topic and every kept choice fit their column widths (MAX_TITLE_LENGTH,
      MAX_TOPIC_LENGTH, MAX_CHOICE_LENGTH): over-long model output costs one
      attempt instead of failing the insert
    - Sanitized choices keep first-seen order and are unique by normalized form
    - Sanitization never returns an empty list when the first raw choice is
      non-blank and within MAX_CHOICE_LENGTH

Design Decisions:
    - Descriptive phrases echoed from the question ("first female prime minister")
      are dropped only when multi-word; single-word echoes are usually the answer itself
    - Fallback to the first raw choice: the model's primary answer beats no answer
"""

from daily_trivia.core.domain_types import Candidate
from daily_trivia.core.normalize import (
    normalize_answer_text,
    normalize_question_text,
)


MIN_TEXT_LENGTH: int = 20
MAX_TEXT_LENGTH: int = 400
MAX_CHOICE_WORDS: int = 4
MAX_TITLE_LENGTH: int = 300
MAX_TOPIC_LENGTH: int = 100
MAX_CHOICE_LENGTH: int = 200


def validate_candidate_shape(candidate: Candidate) -> dict | None:
    """Reject candidates whose text length or choice list cannot be used."""
    length = len(candidate.text)
    if length < MIN_TEXT_LENGTH or length > MAX_TEXT_LENGTH:
        return {
            "status": "error",
            "error_code": "TEXT_LENGTH_OUT_OF_RANGE",
            "message": (
                f"Question text length {length} outside "
                f"[{MIN_TEXT_LENGTH}, {MAX_TEXT_LENGTH}]."
            ),
        }
    for field_name, value, limit in (
        ("title", candidate.title, MAX_TITLE_LENGTH),
        ("topic", candidate.topic, MAX_TOPIC_LENGTH),
    ):
        if len(value) > limit:
            return {
                "status": "error",
                "error_code": "FIELD_TOO_LONG",
                "message": f"Candidate {field_name} longer than {limit} characters.",
            }
    if not candidate.choices:
        return {
            "status": "error",
            "error_code": "NO_CHOICES",
            "message": "Generator returned no choices.",
        }
    return None


def sanitize_choices(question_text: str, choices: list[str]) -> list[str]:
    """Keep short, distinct aliases; drop blanks, long phrases and question echoes."""
    if not choices:
        return []

    question_compact = normalize_question_text(question_text).replace(" ", "")
    seen: set[str] = set()
    kept: list[str] = []
    for choice in choices:
        clean = choice.strip()
        if not clean or len(clean) > MAX_CHOICE_LENGTH:
            continue
        word_count = len(clean.split())
        if word_count > MAX_CHOICE_WORDS:
            continue
        norm = normalize_answer_text(clean)
        if not norm:
            continue
        if word_count > 1 and question_compact and norm in question_compact:
            continue
        if norm in seen:
            continue
        seen.add(norm)
        kept.append(clean)

    if not kept:
        primary = choices[0].strip()
        if primary and len(primary) <= MAX_CHOICE_LENGTH:
            kept.append(primary)
    return kept
