"""SQLAlchemy Question Store — QuestionStore protocol over one AsyncSession.

Invariants:
    - Every SQLAlchemyError is rolled back and re-raised as DatabaseError
    - insert_question writes the question row and its choice index rows in ONE commit
    - insert_answer writes one row in one commit
    - Empty choice lists never reach SQL (has_choice_overlap short-circuits)
    - max_similarity over an empty table is 0.0

Design Decisions:
    - Rows leave the store as plain dicts: services never hold ORM instances
    - Nearest-neighbour computed in Python over stored JSON embeddings
      (one question per day keeps the table small)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from daily_trivia.core.domain_types import Embedding, QuestionId
from daily_trivia.core.errors import DatabaseError
from daily_trivia.core.similarity import max_similarity
from daily_trivia.models.answer import Answer
from daily_trivia.models.question import Question
from daily_trivia.models.question_choice import QuestionChoice

logger = logging.getLogger(__name__)


def question_to_dict(question: Question) -> dict:
    return {
        "id": question.id,
        "title": question.title,
        "text": question.text,
        "topic": question.topic,
        "created_at": question.created_at,
        "choices": list(question.choices or []),
        "choices_signature": question.choices_signature,
    }


class SqlAlchemyQuestionStore:
    """Question/answer persistence backed by SQLAlchemy async ORM."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncGenerator[None, None]:
        """Map SQLAlchemy failures to DatabaseError after rolling back."""
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"DB integrity error during {operation}: {e}")
            raise DatabaseError("Integrity constraint violated", operation)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"DB error during {operation}: {e}")
            raise DatabaseError("Database operation failed", operation)

    async def exists_by_fingerprint(self, sha256: str) -> bool:
        async with self._guard("exists_by_fingerprint"):
            result = await self.db.execute(
                select(Question.id).where(Question.sha256 == sha256).limit(1),
            )
            return result.scalar_one_or_none() is not None

    async def exists_by_signature(self, signature: str) -> bool:
        if not signature:
            return False
        async with self._guard("exists_by_signature"):
            result = await self.db.execute(
                select(Question.id)
                .where(Question.choices_signature == signature)
                .limit(1),
            )
            return result.scalar_one_or_none() is not None

    async def has_choice_overlap(self, normalized_choices: list[str]) -> bool:
        if not normalized_choices:
            return False
        async with self._guard("has_choice_overlap"):
            result = await self.db.execute(
                select(QuestionChoice.id)
                .where(QuestionChoice.choice.in_(normalized_choices))
                .limit(1),
            )
            return result.scalar_one_or_none() is not None

    async def max_similarity(self, embedding: Embedding) -> float:
        async with self._guard("max_similarity"):
            result = await self.db.execute(select(Question.embedding))
            stored = result.scalars().all()
        return max_similarity(embedding, stored)

    async def insert_question(self, fields: dict) -> dict:
        question = Question(
            title=fields["title"],
            text=fields["text"],
            topic=fields.get("topic") or "",
            sha256=fields["sha256"],
            choices=fields.get("choices") or None,
            choices_normalized=fields.get("choices_normalized") or None,
            choices_signature=fields.get("choices_signature") or None,
            embedding=fields["embedding"],
        )
        question.choice_rows = [
            QuestionChoice(choice=choice)
            for choice in fields.get("choices_normalized") or []
        ]
        async with self._guard("insert_question"):
            self.db.add(question)
            await self.db.commit()
        return question_to_dict(question)

    async def insert_answer(self, fields: dict) -> None:
        answer = Answer(
            question_id=fields["question_id"],
            text=fields["text"],
            score=fields["score"],
            feedback=fields.get("feedback") or "",
        )
        async with self._guard("insert_answer"):
            self.db.add(answer)
            await self.db.commit()

    async def latest_question(self) -> dict | None:
        async with self._guard("latest_question"):
            result = await self.db.execute(
                select(Question).order_by(Question.created_at.desc()).limit(1),
            )
            question = result.scalar_one_or_none()
        return question_to_dict(question) if question else None

    async def get_question(self, question_id: QuestionId) -> dict | None:
        async with self._guard("get_question"):
            result = await self.db.execute(
                select(Question).where(Question.id == question_id),
            )
            question = result.scalar_one_or_none()
        return question_to_dict(question) if question else None
