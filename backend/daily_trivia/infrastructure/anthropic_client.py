"""Anthropic Transport — one Messages call with bounded retries and typed failures.

Invariants:
    - Every SDK failure leaves this module as AnthropicAPIError
    - 429 waits for Retry-After when the server sends it, exponential backoff otherwise
    - 5xx, 529 and dropped connections are retried up to max_retries times
      (the service wires max_retries=0; see api/dependencies.py)
    - Timeouts and every other 4xx fail on first occurrence
    - Token usage is logged for each successful call

Design Decisions:
    - classify_error() is a pure lookup: the retry table is readable in one place
      and testable without a network
    - SDK retries disabled (max_retries=0): this wrapper owns count and delays,
      so generation attempts and grading retries stay predictable
    - ±25% jitter on backoff: concurrent callers do not retry in lockstep
"""

import asyncio
import logging
import random
from dataclasses import dataclass

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from daily_trivia.core.errors import AnthropicAPIError, ErrorContext

logger = logging.getLogger(__name__)

_OVERLOADED_STATUS = 529


@dataclass(frozen=True)
class FailureKind:
    api_error_type: str
    retryable: bool
    retry_after_ms: int | None = None


def retry_after_ms(error: APIError) -> int | None:
    """Retry-After header of the failed response, in milliseconds."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    raw = response.headers.get("retry-after")
    if not raw:
        return None
    try:
        return int(float(raw) * 1000)
    except ValueError:
        return None


def classify_error(error: APIError) -> FailureKind:
    # APITimeoutError subclasses APIConnectionError: check it first
    if isinstance(error, APITimeoutError):
        return FailureKind("timeout", retryable=False)
    if isinstance(error, RateLimitError):
        return FailureKind("rate_limit", True, retry_after_ms(error))
    if isinstance(error, (APIConnectionError, InternalServerError)):
        return FailureKind("connection_error", retryable=True)
    if isinstance(error, APIStatusError) and error.status_code == _OVERLOADED_STATUS:
        return FailureKind("overloaded", retryable=True)
    return FailureKind("client_error", retryable=False)


class ResilientAnthropicClient:
    """AsyncAnthropic with this service's retry policy and error mapping."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 60_000,
        timeout_seconds: int = 30,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key, timeout=timeout_seconds, max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        system: str,
        messages: list,
        temperature: float = 1.0,
        context: ErrorContext | None = None,
    ):
        retries = 0
        while True:
            try:
                response = await self.client.messages.create(
                    model=model,
                    max_tokens=max_tokens,
                    system=system,
                    messages=messages,
                    temperature=temperature,
                )
            except APIError as e:
                failure = classify_error(e)
                if not failure.retryable or retries >= self.max_retries:
                    raise self._give_up(e, failure, retries, context)
                delay = failure.retry_after_ms or self.backoff_ms(retries)
                retries += 1
                logger.warning(
                    f"Anthropic {failure.api_error_type}, retry "
                    f"{retries}/{self.max_retries} in {delay}ms",
                    extra={"attempt": retries, "error_code": failure.api_error_type},
                )
                await asyncio.sleep(delay / 1000)
                continue

            logger.info(
                f"Anthropic call ok ({model})",
                extra={
                    "attempt": retries + 1,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )
            return response

    def backoff_ms(self, retries: int) -> int:
        delay = min(self.max_delay_ms, self.base_delay_ms * (2 ** retries))
        return int(delay * random.uniform(0.75, 1.25))

    def _give_up(
        self,
        error: APIError,
        failure: FailureKind,
        retries: int,
        context: ErrorContext | None,
    ) -> AnthropicAPIError:
        if failure.api_error_type == "timeout":
            message = "API timeout"
        elif failure.retryable:
            message = f"Still failing after {retries} retries: {error}"
        else:
            message = str(error)
        return AnthropicAPIError(
            message,
            failure.api_error_type,
            retry_after_ms=failure.retry_after_ms,
            context=context,
        )
