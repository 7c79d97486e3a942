"""Initial schema — questions, question_choices, answers.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "questions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("topic", sa.String(100), nullable=False, server_default=""),
        sa.Column("sha256", sa.String(64), nullable=False, unique=True),
        sa.Column("choices", sa.JSON, nullable=True),
        sa.Column("choices_normalized", sa.JSON, nullable=True),
        sa.Column("choices_signature", sa.String(64), nullable=True, unique=True),
        sa.Column("embedding", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_questions_created_at", "questions", ["created_at"])

    op.create_table(
        "question_choices",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "question_id", UUID(as_uuid=True),
            sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("choice", sa.String(200), nullable=False, unique=True),
    )
    op.create_index("ix_question_choices_question_id", "question_choices", ["question_id"])

    op.create_table(
        "answers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "question_id", UUID(as_uuid=True),
            sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("score", sa.Integer, nullable=False),
        sa.Column("feedback", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_answers_question_id", "answers", ["question_id"])


def downgrade() -> None:
    op.drop_index("ix_answers_question_id", table_name="answers")
    op.drop_table("answers")
    op.drop_index("ix_question_choices_question_id", table_name="question_choices")
    op.drop_table("question_choices")
    op.drop_index("ix_questions_created_at", table_name="questions")
    op.drop_table("questions")
