"""Admin Routes — cron-triggered generation of the next question.

Invariants:
    - X-CRON-KEY must equal the configured cron_key; an unset key locks the endpoint
    - Exhaustion → 409 GENERATION_EXHAUSTED; store failure → 503

Design Decisions:
    - Constant-time key comparison (secrets.compare_digest)
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Header

from daily_trivia.api.dependencies import get_question_service
from daily_trivia.config import get_settings
from daily_trivia.core.errors import UnauthorizedError
from daily_trivia.schemas.question import GeneratedQuestionResponse
from daily_trivia.services.question_service import QuestionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


def require_cron_key(x_cron_key: str | None = Header(None)) -> None:
    expected = get_settings().cron_key
    if not expected or not x_cron_key or not secrets.compare_digest(
        x_cron_key, expected,
    ):
        raise UnauthorizedError()


@router.post(
    "/generate-today",
    response_model=GeneratedQuestionResponse,
    dependencies=[Depends(require_cron_key)],
)
async def generate_today(
    service: QuestionService = Depends(get_question_service),
):
    """Generate, novelty-check and store a new question."""
    result = await service.generate_question()
    logger.info(
        f"Generated question in {result.attempts} attempt(s)",
        extra={
            "question_id": str(result.question["id"]),
            "attempt": result.attempts,
            "similarity": round(result.similarity, 3),
        },
    )
    return GeneratedQuestionResponse(
        **result.question,
        similarity=round(result.similarity, 3),
        attempts=result.attempts,
    )
