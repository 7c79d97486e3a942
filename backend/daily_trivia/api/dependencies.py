"""Dependency Wiring — builds external clients and per-request services for FastAPI.

Invariants:
    - External clients (Anthropic, OpenAI) are built once per process (lru_cache)
    - QuestionService is built per request around that request's AsyncSession
    - Nothing here holds request state between calls

Design Decisions:
    - Generator, embedder and grader are separate dependencies so tests can
      override each with a deterministic fake via app.dependency_overrides
    - The Anthropic client is built with max_retries=0: a failed grader call
      surfaces at once and each generation attempt costs exactly one request
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from daily_trivia.config import get_settings
from daily_trivia.core.repository_protocols import (
    AnswerGrader, QuestionGenerator, TextEmbedder,
)
from daily_trivia.infrastructure.anthropic_client import ResilientAnthropicClient
from daily_trivia.infrastructure.answer_grader import AnthropicAnswerGrader
from daily_trivia.infrastructure.database import get_db
from daily_trivia.infrastructure.openai_embedder import OpenAIEmbedder
from daily_trivia.infrastructure.question_generator import AnthropicQuestionGenerator
from daily_trivia.infrastructure.question_store import SqlAlchemyQuestionStore
from daily_trivia.services.question_service import QuestionService


@lru_cache
def get_anthropic_client() -> ResilientAnthropicClient:
    settings = get_settings()
    return ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        # one SDK call per generator/grader call: retries belong to the orchestrators
        max_retries=0,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )


def get_generator() -> QuestionGenerator:
    return AnthropicQuestionGenerator(
        get_anthropic_client(), get_settings().generator_model,
    )


def get_grader() -> AnswerGrader:
    return AnthropicAnswerGrader(
        get_anthropic_client(), get_settings().grader_model,
    )


@lru_cache
def get_embedder() -> TextEmbedder:
    settings = get_settings()
    return OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embed_model,
        timeout_seconds=settings.embed_timeout_seconds,
    )


def get_question_service(
    db: AsyncSession = Depends(get_db),
    generator: QuestionGenerator = Depends(get_generator),
    embedder: TextEmbedder = Depends(get_embedder),
    grader: AnswerGrader = Depends(get_grader),
) -> QuestionService:
    settings = get_settings()
    return QuestionService(
        SqlAlchemyQuestionStore(db),
        generator,
        embedder,
        grader,
        max_attempts=settings.max_generation_attempts,
        similarity_threshold=settings.similarity_threshold,
    )
