"""Answer Routes — submit a free-text answer and get it graded.

Invariants:
    - Body validated by AnswerCreate before the service runs (400 otherwise)
    - The answer is persisted exactly once, only after grading succeeded
    - Grader failure → 502, unknown question → 404, nothing persisted on either
"""

from fastapi import APIRouter, Depends

from daily_trivia.api.dependencies import get_question_service
from daily_trivia.core.domain_types import QuestionId
from daily_trivia.schemas.question import AnswerCreate, AnswerResponse
from daily_trivia.services.question_service import QuestionService

router = APIRouter(prefix="/api/v1/answers", tags=["answers"])


@router.post("", response_model=AnswerResponse)
async def submit_answer(
    body: AnswerCreate,
    service: QuestionService = Depends(get_question_service),
):
    outcome = await service.submit_answer(QuestionId(body.question_id), body.text)
    return AnswerResponse(score=outcome.score, feedback=outcome.feedback)
