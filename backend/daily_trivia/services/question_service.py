"""Question Service — facade the HTTP routes talk to.

Invariants:
    - One service instance per request (its store is bound to one AsyncSession)
    - Read paths translate "absent" into NotFound errors; routes never see None

Design Decisions:
    - Facade over three collaborators keeps route handlers to parse → call → shape
"""

from daily_trivia.core.domain_types import QuestionId
from daily_trivia.core.errors import (
    ErrorContext, NoQuestionYetError, ResourceNotFoundError,
)
from daily_trivia.core.repository_protocols import (
    AnswerGrader, QuestionGenerator, QuestionStore, TextEmbedder,
)
from daily_trivia.services.generation_orchestrator import (
    GenerationOrchestrator, GenerationResult, MAX_GENERATION_ATTEMPTS,
)
from daily_trivia.services.grading_orchestrator import (
    GradingOrchestrator, GradingOutcome,
)
from daily_trivia.services.novelty_gate import SIMILARITY_THRESHOLD


class QuestionService:
    """Today's question, answer submission and generation for one request."""

    def __init__(
        self,
        store: QuestionStore,
        generator: QuestionGenerator,
        embedder: TextEmbedder,
        grader: AnswerGrader,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
        similarity_threshold: float = SIMILARITY_THRESHOLD,
    ):
        self.store = store
        self.generation = GenerationOrchestrator(
            store, generator, embedder, max_attempts, similarity_threshold,
        )
        self.grading = GradingOrchestrator(grader, store)

    async def get_today(self) -> dict:
        question = await self.store.latest_question()
        if question is None:
            raise NoQuestionYetError()
        return question

    async def get_question(self, question_id: QuestionId) -> dict:
        question = await self.store.get_question(question_id)
        if question is None:
            raise ResourceNotFoundError(
                "Question", str(question_id),
                ErrorContext(question_id=str(question_id)),
            )
        return question

    async def submit_answer(
        self, question_id: QuestionId, answer_text: str,
    ) -> GradingOutcome:
        return await self.grading.submit_answer(question_id, answer_text)

    async def generate_question(self) -> GenerationResult:
        return await self.generation.generate()
