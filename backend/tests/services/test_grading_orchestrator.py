"""Grading Orchestrator — tests for deterministic-first answer scoring.

Tests cover:
    - Choice matcher hits (labels, aliases) score without a grader call
    - Grader matches are re-validated against the question's own choices
    - Malformed grader replies are retried exactly once
    - Open-ended questions go straight to the grader with the question text
    - submit_answer persists once, strips input, and persists nothing on failure
"""

import uuid

import pytest

from daily_trivia.core.domain_types import (
    ACCEPTED_SCORE, REJECTED_SCORE, GradeResult, GradeSource,
)
from daily_trivia.core.errors import (
    AnthropicAPIError, MalformedResponseError, ResourceNotFoundError,
)
from daily_trivia.services.grading_orchestrator import (
    FEEDBACK_ACCEPTED_CHOICE,
    FEEDBACK_ACCEPTED_OPEN,
    FEEDBACK_ALIAS_NOT_IN_LIST,
    FEEDBACK_REJECTED_CHOICE,
    FEEDBACK_REJECTED_OPEN,
    GradingOrchestrator,
    claimed_choice_is_listed,
)
from tests.fakes import FakeGrader, FakeStore

GERMANY = ["Bonn", "the Federal City"]


# ─── Deterministic path ─────────────────────────────────────────

@pytest.mark.asyncio
async def test_label_answer_accepted_without_grader():
    grader = FakeGrader([])
    outcome = await GradingOrchestrator(grader).grade(["Tokyo", "Osaka"], "a")
    assert outcome.score == ACCEPTED_SCORE
    assert outcome.feedback == FEEDBACK_ACCEPTED_CHOICE
    assert outcome.source is GradeSource.CHOICE_MATCH
    assert grader.calls == []


@pytest.mark.asyncio
async def test_normalized_alias_accepted_without_grader():
    grader = FakeGrader([])
    outcome = await GradingOrchestrator(grader).grade(GERMANY, "federal city!")
    assert outcome.score == ACCEPTED_SCORE
    assert grader.calls == []


# ─── Grader path ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_hallucinated_choice_downgraded():
    grader = FakeGrader([GradeResult(match=True, matched_choice="Berlin")])
    outcome = await GradingOrchestrator(grader).grade(GERMANY, "Berlin")
    assert outcome.score == REJECTED_SCORE
    assert outcome.feedback == FEEDBACK_ALIAS_NOT_IN_LIST
    assert outcome.source is GradeSource.GRADER


@pytest.mark.asyncio
async def test_hallucination_keeps_grader_reason():
    grader = FakeGrader([
        GradeResult(match=True, reason="Close enough.", matched_choice="Berlin"),
    ])
    outcome = await GradingOrchestrator(grader).grade(GERMANY, "Berlin")
    assert outcome.score == REJECTED_SCORE
    assert outcome.feedback == "Close enough."


@pytest.mark.asyncio
async def test_grader_match_on_listed_choice_accepted():
    grader = FakeGrader([GradeResult(match=True, matched_choice="BONN")])
    outcome = await GradingOrchestrator(grader).grade(GERMANY, "Bon")
    assert outcome.score == ACCEPTED_SCORE
    assert outcome.feedback == FEEDBACK_ACCEPTED_CHOICE
    assert grader.calls == [("Bon", GERMANY, None)]


@pytest.mark.asyncio
async def test_grader_no_match_default_feedback():
    grader = FakeGrader([GradeResult(match=False)])
    outcome = await GradingOrchestrator(grader).grade(GERMANY, "Munich")
    assert outcome.score == REJECTED_SCORE
    assert outcome.feedback == FEEDBACK_REJECTED_CHOICE


@pytest.mark.asyncio
async def test_malformed_reply_retried_once():
    grader = FakeGrader([
        MalformedResponseError("not json", "Answer grader"),
        GradeResult(match=True, matched_choice="Bonn"),
    ])
    outcome = await GradingOrchestrator(grader).grade(GERMANY, "Bonn city")
    assert outcome.score == ACCEPTED_SCORE
    assert len(grader.calls) == 2
    assert grader.calls[0] == grader.calls[1]


@pytest.mark.asyncio
async def test_second_malformed_reply_propagates():
    grader = FakeGrader([
        MalformedResponseError("not json", "Answer grader"),
        MalformedResponseError("still not json", "Answer grader"),
    ])
    with pytest.raises(MalformedResponseError):
        await GradingOrchestrator(grader).grade(GERMANY, "Bonn city")
    assert len(grader.calls) == 2


@pytest.mark.asyncio
async def test_transport_error_not_retried():
    grader = FakeGrader([AnthropicAPIError("down", "connection_error")])
    with pytest.raises(AnthropicAPIError):
        await GradingOrchestrator(grader).grade(GERMANY, "Bonn city")
    assert len(grader.calls) == 1


# ─── Open-ended ─────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_open_ended_uses_question_text():
    grader = FakeGrader([GradeResult(match=True)])
    outcome = await GradingOrchestrator(grader).grade(
        [], "Canberra", "What is the capital of Australia?",
    )
    assert outcome.score == ACCEPTED_SCORE
    assert outcome.feedback == FEEDBACK_ACCEPTED_OPEN
    assert grader.calls == [("Canberra", None, "What is the capital of Australia?")]


@pytest.mark.asyncio
async def test_open_ended_rejection_default_feedback():
    grader = FakeGrader([GradeResult(match=False)])
    outcome = await GradingOrchestrator(grader).grade([], "Sydney", "Capital?")
    assert outcome.score == REJECTED_SCORE
    assert outcome.feedback == FEEDBACK_REJECTED_OPEN


def test_claimed_choice_is_listed():
    assert claimed_choice_is_listed("the Bonn", GERMANY)
    assert claimed_choice_is_listed("federal city", GERMANY)
    assert not claimed_choice_is_listed("Berlin", GERMANY)
    assert not claimed_choice_is_listed("", GERMANY)
    assert not claimed_choice_is_listed("...", GERMANY)


# ─── submit_answer ──────────────────────────────────────────────

def _store_with_question(choices: list[str]) -> tuple[FakeStore, uuid.UUID]:
    store = FakeStore()
    question_id = uuid.uuid4()
    store.questions.append({
        "id": question_id,
        "text": "What was the capital of West Germany?",
        "choices": choices,
    })
    return store, question_id


@pytest.mark.asyncio
async def test_submit_answer_persists_once():
    store, question_id = _store_with_question(GERMANY)
    orchestrator = GradingOrchestrator(FakeGrader([]), store)

    outcome = await orchestrator.submit_answer(question_id, "  Bonn  ")

    assert outcome.score == ACCEPTED_SCORE
    assert store.answers == [{
        "question_id": question_id,
        "text": "Bonn",
        "score": ACCEPTED_SCORE,
        "feedback": FEEDBACK_ACCEPTED_CHOICE,
    }]


@pytest.mark.asyncio
async def test_submit_answer_unknown_question():
    store = FakeStore()
    orchestrator = GradingOrchestrator(FakeGrader([]), store)
    with pytest.raises(ResourceNotFoundError):
        await orchestrator.submit_answer(uuid.uuid4(), "Bonn")
    assert store.answers == []


@pytest.mark.asyncio
async def test_submit_answer_grader_failure_persists_nothing():
    store, question_id = _store_with_question(GERMANY)
    grader = FakeGrader([AnthropicAPIError("down", "timeout")])
    orchestrator = GradingOrchestrator(grader, store)
    with pytest.raises(AnthropicAPIError):
        await orchestrator.submit_answer(question_id, "Munich")
    assert store.answers == []


@pytest.mark.asyncio
async def test_submit_answer_open_ended_question():
    store, question_id = _store_with_question([])
    grader = FakeGrader([GradeResult(match=False, reason="That is Berlin.")])
    orchestrator = GradingOrchestrator(grader, store)

    outcome = await orchestrator.submit_answer(question_id, "Berlin")

    assert outcome.score == REJECTED_SCORE
    assert grader.calls == [("Berlin", None, "What was the capital of West Germany?")]
    assert store.answers[0]["feedback"] == "That is Berlin."


@pytest.mark.asyncio
async def test_submit_without_store_is_programming_error():
    with pytest.raises(RuntimeError):
        await GradingOrchestrator(FakeGrader([])).submit_answer(uuid.uuid4(), "x")
