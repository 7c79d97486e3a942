"""Question & Answer Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - AnswerCreate.text: stripped, 1-4000 chars, non-empty after strip
    - QuestionResponse never exposes accepted choices (they are the answers)
    - GeneratedQuestionResponse (admin only) includes choices and similarity

Design Decisions:
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

MAX_ANSWER_LENGTH = 4000


class AnswerCreate(BaseModel):
    """Answer submission — validates question id and answer text."""
    question_id: UUID
    text: str = Field(min_length=1, max_length=MAX_ANSWER_LENGTH)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("text cannot be empty or whitespace")
        return v


class AnswerResponse(BaseModel):
    score: int
    feedback: str


class QuestionResponse(BaseModel):
    """Public question — what a player sees."""
    id: UUID
    title: str
    text: str
    topic: str
    created_at: datetime


class GeneratedQuestionResponse(QuestionResponse):
    """Admin view of a freshly generated question."""
    choices: list[str] = Field(default_factory=list)
    similarity: float
    attempts: int
