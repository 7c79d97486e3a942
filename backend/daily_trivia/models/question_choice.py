"""QuestionChoice ORM — one normalized accepted choice of a stored question.

Invariants:
    - choice is globally unique: no two questions accept the same normalized answer
    - Always belongs to a Question (question_id FK, cascade delete)

Design Decisions:
    - Separate table over JSON containment queries: the overlap lookup is a plain
      indexed IN (...) on every backend, and the unique index closes the race
      between two concurrent generation requests
"""

import uuid

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from daily_trivia.core.validate_candidate import MAX_CHOICE_LENGTH
from daily_trivia.db.base import Base


class QuestionChoice(Base):
    """Normalized choice index row."""
    __tablename__ = "question_choices"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    choice: Mapped[str] = mapped_column(
        String(MAX_CHOICE_LENGTH), nullable=False, unique=True,
    )

    question: Mapped["Question"] = relationship(
        "Question", back_populates="choice_rows",
    )
