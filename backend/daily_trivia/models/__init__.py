"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Question is the aggregate root; choices and answers reference it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from daily_trivia.models.question import Question  # noqa: F401
from daily_trivia.models.question_choice import QuestionChoice  # noqa: F401
from daily_trivia.models.answer import Answer  # noqa: F401
