"""Question ORM — persists an accepted, novel trivia question.

Invariants:
    - sha256 (content fingerprint) is unique
    - choices_signature is unique when present (NULL = no signature)
    - choices preserves presentation order; choices_normalized is sorted and unique
    - Immutable after insert; never deleted by the application

Design Decisions:
    - embedding stored as JSON float array: portable across PostgreSQL and SQLite,
      nearest-neighbour computed in Python (daily_trivia/core/similarity.py)
    - choices_normalized duplicated on question_choices rows: the JSON copy is the
      record, the rows are the index that enforces global choice uniqueness
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from daily_trivia.core.validate_candidate import MAX_TITLE_LENGTH, MAX_TOPIC_LENGTH
from daily_trivia.db.base import Base


class Question(Base):
    """Question entity — one daily trivia question."""
    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(MAX_TITLE_LENGTH), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(String(MAX_TOPIC_LENGTH), nullable=False, default="")
    sha256: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    choices: Mapped[list | None] = mapped_column(JSON, nullable=True)
    choices_normalized: Mapped[list | None] = mapped_column(JSON, nullable=True)
    choices_signature: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True,
    )
    embedding: Mapped[list] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    # Relationships
    choice_rows: Mapped[list["QuestionChoice"]] = relationship(
        "QuestionChoice", back_populates="question",
        cascade="all, delete-orphan",
    )
    answers: Mapped[list["Answer"]] = relationship(
        "Answer", back_populates="question",
        cascade="all, delete-orphan",
    )
