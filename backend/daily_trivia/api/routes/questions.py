"""Question Routes — today's question and lookup by id.

Invariants:
    - Responses never include accepted choices
    - Empty store → 404 NO_QUESTION_YET; unknown id → 404 RESOURCE_NOT_FOUND
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from daily_trivia.api.dependencies import get_question_service
from daily_trivia.core.domain_types import QuestionId
from daily_trivia.schemas.question import QuestionResponse
from daily_trivia.services.question_service import QuestionService

router = APIRouter(prefix="/api/v1/questions", tags=["questions"])


@router.get("/today", response_model=QuestionResponse)
async def get_today(service: QuestionService = Depends(get_question_service)):
    """Latest stored question."""
    return QuestionResponse(**await service.get_today())


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: UUID,
    service: QuestionService = Depends(get_question_service),
):
    return QuestionResponse(
        **await service.get_question(QuestionId(question_id)),
    )
