"""Grading Orchestrator — scores a free-text answer, deterministic first, LLM second.

Invariants:
    - Choice matcher hit → ACCEPTED_SCORE without calling the grader
    - A grader match counts only if its matched_choice normalizes to one of the
      question's own choices (the grader never introduces an answer)
    - Unparseable grader replies are retried exactly once with the same payload
    - Any other grader failure propagates; nothing is persisted on that path
    - submit_answer persists exactly one Answer, after the score is final

Design Decisions:
    - grade() is separate from submit_answer(): scoring is testable without a store
    - Feedback defaults mirror the two question kinds (choice list vs open-ended)
"""

import logging
from dataclasses import dataclass

from daily_trivia.core.choice_matcher import matches_choice
from daily_trivia.core.domain_types import (
    ACCEPTED_SCORE, REJECTED_SCORE, GradeResult, GradeSource, QuestionId,
)
from daily_trivia.core.errors import (
    ErrorContext, MalformedResponseError, ResourceNotFoundError,
)
from daily_trivia.core.normalize import normalize_answer_text
from daily_trivia.core.repository_protocols import AnswerGrader, QuestionStore

logger = logging.getLogger(__name__)

FEEDBACK_ACCEPTED_CHOICE = "Accepted choice."
FEEDBACK_REJECTED_CHOICE = "Answer not recognized as acceptable."
FEEDBACK_ALIAS_NOT_IN_LIST = "LLM match rejected: alias not in list."
FEEDBACK_ACCEPTED_OPEN = "Accepted answer."
FEEDBACK_REJECTED_OPEN = "Answer not recognized."


@dataclass(frozen=True)
class GradingOutcome:
    score: int
    feedback: str
    source: GradeSource


def claimed_choice_is_listed(matched_choice: str, choices: list[str]) -> bool:
    """Re-validate the grader's claimed choice against the canonical list. Pure."""
    claimed = normalize_answer_text(matched_choice)
    if not claimed:
        return False
    return any(claimed == normalize_answer_text(c) for c in choices)


class GradingOrchestrator:
    """Choice matcher → grader → anti-hallucination check → store."""

    def __init__(self, grader: AnswerGrader, store: QuestionStore | None = None):
        self.grader = grader
        self.store = store

    async def grade(
        self,
        choices: list[str],
        answer: str,
        question_text: str | None = None,
    ) -> GradingOutcome:
        """Score one answer. Raises ExternalServiceError if the grader fails."""
        if choices:
            return await self._grade_against_choices(choices, answer)
        return await self._grade_open_ended(answer, question_text)

    async def submit_answer(
        self, question_id: QuestionId, answer_text: str,
    ) -> GradingOutcome:
        """Look up the question, grade, and persist the answer once."""
        if self.store is None:
            raise RuntimeError("GradingOrchestrator has no store to submit to")
        question = await self.store.get_question(question_id)
        if question is None:
            raise ResourceNotFoundError(
                "Question", str(question_id),
                ErrorContext(question_id=str(question_id)),
            )

        answer_text = answer_text.strip()
        outcome = await self.grade(
            question.get("choices") or [], answer_text, question.get("text"),
        )
        await self.store.insert_answer({
            "question_id": question_id,
            "text": answer_text,
            "score": outcome.score,
            "feedback": outcome.feedback,
        })
        logger.info(
            f"Answer graded: score={outcome.score} via {outcome.source.value}",
            extra={"question_id": str(question_id)},
        )
        return outcome

    async def _grade_against_choices(
        self, choices: list[str], answer: str,
    ) -> GradingOutcome:
        if matches_choice(answer, choices):
            return GradingOutcome(
                ACCEPTED_SCORE, FEEDBACK_ACCEPTED_CHOICE, GradeSource.CHOICE_MATCH,
            )

        result = await self._call_grader(answer, choices, None)
        matched = result.match
        feedback = result.reason
        if matched and not claimed_choice_is_listed(result.matched_choice, choices):
            logger.warning(
                f"Grader claimed unlisted choice {result.matched_choice!r}; "
                "downgrading to no match",
            )
            matched = False
            if not feedback:
                feedback = FEEDBACK_ALIAS_NOT_IN_LIST

        if not feedback:
            feedback = FEEDBACK_ACCEPTED_CHOICE if matched else FEEDBACK_REJECTED_CHOICE
        return GradingOutcome(
            ACCEPTED_SCORE if matched else REJECTED_SCORE,
            feedback,
            GradeSource.GRADER,
        )

    async def _grade_open_ended(
        self, answer: str, question_text: str | None,
    ) -> GradingOutcome:
        result = await self._call_grader(answer, None, question_text)
        feedback = result.reason or (
            FEEDBACK_ACCEPTED_OPEN if result.match else FEEDBACK_REJECTED_OPEN
        )
        return GradingOutcome(
            ACCEPTED_SCORE if result.match else REJECTED_SCORE,
            feedback,
            GradeSource.GRADER,
        )

    async def _call_grader(
        self,
        answer: str,
        choices: list[str] | None,
        question_text: str | None,
    ) -> GradeResult:
        """One retry on an unparseable reply; every other failure propagates."""
        try:
            return await self.grader.grade(answer, choices, question_text)
        except MalformedResponseError as e:
            logger.warning(
                f"Grader reply unparseable, retrying once: {e.message}",
                extra={"error_code": e.code},
            )
            return await self.grader.grade(answer, choices, question_text)
