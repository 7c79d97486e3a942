"""Answer grader adapter — tests for request payloads and reply parsing."""

import json
import logging

import anthropic
import httpx
import pytest

from daily_trivia.api.dependencies import get_anthropic_client
from daily_trivia.core.errors import AnthropicAPIError, MalformedResponseError
from daily_trivia.infrastructure.answer_grader import (
    AnthropicAnswerGrader,
    build_grade_request,
    grade_from_payload,
)
from daily_trivia.services.grading_orchestrator import GradingOrchestrator
from tests.infrastructure.mock_anthropic import MockAnthropicClient, text_message

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def test_choice_request_carries_choices():
    system, user = build_grade_request("Bonn", ["Bonn", "Federal City"], None)
    payload = json.loads(user)
    assert payload["answer"] == "Bonn"
    assert payload["choices"] == ["Bonn", "Federal City"]
    assert "question" not in payload
    assert "list of acceptable answers" in system


def test_open_request_carries_question():
    system, user = build_grade_request("Canberra", None, "Capital of Australia?")
    payload = json.loads(user)
    assert payload["question"] == "Capital of Australia?"
    assert "choices" not in payload
    assert "trivia question" in system


def test_request_is_deterministic():
    assert build_grade_request("São Paulo", ["SP"], None) == build_grade_request(
        "São Paulo", ["SP"], None,
    )


def test_payload_mapping():
    result = grade_from_payload(
        {"match": True, "matched_choice": "Bonn", "reason": " Same city. "},
    )
    assert result.match is True
    assert result.matched_choice == "Bonn"
    assert result.reason == "Same city."


@pytest.mark.parametrize("payload", [
    {"match": "true"},
    {"reason": "missing match"},
    {"match": False, "reason": ["list"]},
])
def test_bad_payload_is_malformed(payload):
    with pytest.raises(MalformedResponseError):
        grade_from_payload(payload)


@pytest.mark.asyncio
async def test_grade_calls_client_at_zero_temperature():
    client = MockAnthropicClient([
        text_message('```json\n{"match": false, "matched_choice": "", "reason": "No."}\n```'),
    ])
    grader = AnthropicAnswerGrader(client, "claude-grader")

    result = await grader.grade("Munich", ["Bonn"])

    assert result.match is False
    assert result.reason == "No."
    call = client.calls[0]
    assert call["temperature"] == 0.0
    assert call["max_tokens"] == 256
    assert call["model"] == "claude-grader"


@pytest.mark.asyncio
async def test_grade_logs_verdict(caplog):
    caplog.set_level(logging.INFO, logger="daily_trivia.infrastructure.answer_grader")
    client = MockAnthropicClient([
        text_message('{"match": true, "matched_choice": "Bonn", "reason": "Same."}'),
    ])

    await AnthropicAnswerGrader(client, "m").grade("bonn", ["Bonn"])

    [record] = [
        r for r in caplog.records
        if r.name == "daily_trivia.infrastructure.answer_grader"
    ]
    assert record.outcome == "match"


@pytest.mark.asyncio
async def test_wired_grader_surfaces_server_error_after_one_call():
    get_anthropic_client.cache_clear()
    try:
        client = get_anthropic_client()
        sdk = MockAnthropicClient([
            anthropic.InternalServerError(
                "overloaded backend",
                response=httpx.Response(500, request=_REQUEST),
                body=None,
            )
            for _ in range(4)
        ])
        client.client = sdk
        orchestrator = GradingOrchestrator(AnthropicAnswerGrader(client, "m"))

        with pytest.raises(AnthropicAPIError) as exc_info:
            await orchestrator.grade(["Paris"], "Berlin")

        assert exc_info.value.http_status == 502
        assert len(sdk.calls) == 1
    finally:
        get_anthropic_client.cache_clear()
