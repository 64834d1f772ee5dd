"""Submission Service - Registra uma tentativa de forma atomica."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.cache import AnalyticsCache
from core.exceptions import (
    AttemptLimitExceededError,
    AuthenticationRequiredError,
    ExamForgeError,
    InternalError,
    QuizNotFoundError,
    ThrottledError,
)
from core.logger import get_logger
from core.rate_limiter import SlidingWindowRateLimiter

from ..models.domain import AnsweredQuestion, GradeReport, QuizSpec
from ..models.schemas import SubmitQuizResponseRequest
from ..storage.database import Database
from ..storage.quiz_store import QuizStore
from .scoring_engine import ResponseScoringEngine

logger = get_logger("submission")

THROTTLE_PREFIX = "quiz-submission"


@dataclass(frozen=True)
class SubmissionContext:
    """Quem esta enviando a tentativa."""

    user_id: Optional[str] = None
    client_address: str = "unknown"

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


@dataclass
class SubmissionOutcome:
    """Tentativa confirmada no banco."""

    response_id: str
    quiz: QuizSpec
    report: GradeReport
    started_at: datetime
    completed_at: datetime
    time_taken: Optional[int] = None


def throttle_key(quiz_id: str, client_address: str) -> str:
    return f"{THROTTLE_PREFIX}:{quiz_id}:{client_address}"


def elapsed_seconds(started_at: datetime, completed_at: datetime) -> Optional[int]:
    try:
        return max(0, int((completed_at - started_at).total_seconds()))
    except TypeError:
        return None


class SubmissionService:
    """Valida, corrige e grava uma tentativa em uma unica transacao.

    Ordem das verificacoes:
        1. Quiz existe e esta publicado (404)
        2. Quiz com senha exige usuario autenticado (401)
        3. Limite de tentativas para usuario identificado (403)
        4. Limite de envios anonimos por cliente (429)

    A tentativa, os resultados por questao e a pontuacao final sao gravados
    na mesma transacao; qualquer falha desfaz tudo. O envio anonimo so conta
    no limite e o cache de analytics so e invalidado depois do commit.

    Example:
        >>> service = SubmissionService(db, cache, limiter)
        >>> outcome = await service.submit(request, SubmissionContext(user_id="u1"))
        >>> print(outcome.report.score)
    """

    def __init__(
        self,
        database: Database,
        cache: AnalyticsCache,
        submission_limiter: SlidingWindowRateLimiter,
        scoring_engine: Optional[ResponseScoringEngine] = None,
    ):
        self.database = database
        self.cache = cache
        self.submission_limiter = submission_limiter
        self.scoring_engine = scoring_engine or ResponseScoringEngine()

    async def _check_access(
        self, store: QuizStore, quiz: QuizSpec, context: SubmissionContext
    ) -> None:
        if quiz.requires_password and context.is_anonymous:
            raise AuthenticationRequiredError(
                "Autenticação necessária para quizzes protegidos por senha",
                details={"quiz_id": quiz.id},
            )

        if quiz.max_attempts and not context.is_anonymous:
            attempts = await store.count_attempts(quiz.id, context.user_id)
            if attempts >= quiz.max_attempts:
                raise AttemptLimitExceededError(
                    details={"quiz_id": quiz.id, "max_attempts": quiz.max_attempts}
                )

        if context.is_anonymous:
            result = self.submission_limiter.check(
                throttle_key(quiz.id, context.client_address), record=False
            )
            if not result.allowed:
                logger.warning(
                    "Envio anonimo bloqueado",
                    quiz_id=quiz.id,
                    client=context.client_address,
                    retry_after=result.retry_after,
                )
                raise ThrottledError(
                    "Muitos envios. Tente novamente mais tarde.",
                    details={"quiz_id": quiz.id},
                    retry_after=result.retry_after,
                )

    async def submit(
        self, request: SubmitQuizResponseRequest, context: SubmissionContext
    ) -> SubmissionOutcome:
        """Processa o envio de uma tentativa.

        Raises:
            QuizNotFoundError: quiz inexistente ou nao publicado
            AuthenticationRequiredError: quiz com senha e usuario anonimo
            AttemptLimitExceededError: limite de tentativas atingido
            ThrottledError: limite de envios anonimos atingido
            InternalError: falha inesperada (transacao desfeita)
        """
        answers = [
            AnsweredQuestion(question_id=r.question_id, answer=r.answer, time_spent=r.time_spent)
            for r in request.responses
        ]
        time_taken = elapsed_seconds(request.started_at, request.completed_at)

        try:
            async with self.database.session() as session, session.begin():
                store = QuizStore(session)

                quiz = await store.load_published_quiz(request.quiz_id)
                if quiz is None:
                    raise QuizNotFoundError(details={"quiz_id": request.quiz_id})

                await self._check_access(store, quiz, context)

                report = self.scoring_engine.grade(quiz, answers)

                response = await store.create_attempt(
                    quiz_id=quiz.id,
                    user_id=context.user_id,
                    started_at=request.started_at,
                    completed_at=request.completed_at,
                    participant_name=request.participant_name,
                    participant_email=request.participant_email,
                )
                for position, result in enumerate(report.results):
                    await store.add_result(response.id, position, result)
                await store.finalize_attempt(response, report, time_taken)
                response_id = response.id
        except ExamForgeError:
            raise
        except Exception as e:
            logger.error(
                "Falha ao registrar tentativa",
                quiz_id=request.quiz_id,
                error=str(e),
                exc_info=True,
            )
            raise InternalError(
                "Falha ao registrar a tentativa", details={"quiz_id": request.quiz_id}
            ) from e

        if context.is_anonymous:
            self.submission_limiter.record(throttle_key(quiz.id, context.client_address))

        await self.cache.invalidate(quiz.id)
        if context.user_id:
            await self.cache.invalidate_dashboard(context.user_id)

        logger.info(
            "Tentativa registrada",
            quiz_id=quiz.id,
            response_id=response_id,
            score=report.score,
            total_points=report.total_points,
            is_passed=report.is_passed,
            anonymous=context.is_anonymous,
        )

        return SubmissionOutcome(
            response_id=response_id,
            quiz=quiz,
            report=report,
            started_at=request.started_at,
            completed_at=request.completed_at,
            time_taken=time_taken,
        )
