"""Question generator adapter — tests for request shape and payload mapping."""

import json
import logging

import pytest

from daily_trivia.core.errors import AnthropicAPIError, MalformedResponseError
from daily_trivia.infrastructure.question_generator import (
    AnthropicQuestionGenerator,
    candidate_from_payload,
)
from tests.infrastructure.mock_anthropic import MockAnthropicClient, text_message

PAYLOAD = {
    "title": "Element 79",
    "text": "Which chemical element has the atomic number 79 on the periodic table?",
    "topic": "science",
    "choices": ["Gold", "Au"],
}


@pytest.mark.asyncio
async def test_generate_maps_reply_to_candidate():
    client = MockAnthropicClient([text_message(json.dumps(PAYLOAD))])
    generator = AnthropicQuestionGenerator(client, "claude-test")

    candidate = await generator.generate()

    assert candidate.title == "Element 79"
    assert candidate.choices == ["Gold", "Au"]
    call = client.calls[0]
    assert call["model"] == "claude-test"
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 512
    assert call["messages"][0]["role"] == "user"
    assert "strict JSON" in call["system"]


@pytest.mark.asyncio
async def test_generate_logs_candidate_topic(caplog):
    caplog.set_level(logging.INFO, logger="daily_trivia.infrastructure.question_generator")
    client = MockAnthropicClient([text_message(json.dumps(PAYLOAD))])

    await AnthropicQuestionGenerator(client, "claude-test").generate()

    assert "Candidate received (topic: science)" in caplog.messages


@pytest.mark.asyncio
async def test_prose_reply_is_malformed():
    client = MockAnthropicClient([text_message("Here is a fun fact about gold.")])
    with pytest.raises(MalformedResponseError):
        await AnthropicQuestionGenerator(client, "m").generate()


@pytest.mark.asyncio
async def test_transport_error_propagates():
    client = MockAnthropicClient([AnthropicAPIError("down", "connection_error")])
    with pytest.raises(AnthropicAPIError):
        await AnthropicQuestionGenerator(client, "m").generate()


def test_missing_fields_become_empty():
    candidate = candidate_from_payload({"text": "Q?"})
    assert candidate.title == ""
    assert candidate.topic == ""
    assert candidate.choices == []


@pytest.mark.parametrize("payload", [
    {"text": 42},
    {"text": "Q?", "choices": "Gold"},
    {"text": "Q?", "choices": ["Gold", 7]},
])
def test_wrong_types_are_malformed(payload):
    with pytest.raises(MalformedResponseError):
        candidate_from_payload(payload)
