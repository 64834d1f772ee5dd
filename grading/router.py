"""Grading Router - Endpoints de envio, historico e estatisticas."""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request

import app_state
from core.auth import extract_token
from core.config import get_config
from core.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    IncorrectPasswordError,
    QuizNotFoundError,
    ResponseNotFoundError,
    ThrottledError,
    ValidationError,
)
from core.logger import get_logger
from core.rate_limiter import get_client_address

from .engine.scoring_engine import ResponseScoringEngine
from .engine.submission import SubmissionContext, SubmissionOutcome
from .models.enums import QuizStatus
from .models.schemas import (
    QuestionResultOut,
    QuizResponseDetail,
    QuizResponseDetailResponse,
    QuizResponseHistory,
    QuizResponseItem,
    QuizStats,
    QuizStatsResponse,
    QuizSummary,
    SubmissionResult,
    SubmitQuizResponseRequest,
    SubmitQuizResponseResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from .storage.models import QuizResponse
from .storage.quiz_store import QuizStore, decode_answer

logger = get_logger("router")

router = APIRouter(prefix="/quiz", tags=["Quiz Responses"])

limiter = app_state.limiter

PASSWORD_THROTTLE_PREFIX = "quiz-password"


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


def get_optional_user_id(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Usuario autenticado, ou None (token ausente ou invalido = anonimo)."""
    token = extract_token(authorization)
    if not token:
        return None
    result = app_state.get_session_manager().authenticate(token)
    return result.user_id if result.authenticated else None


def require_user_id(authorization: Optional[str] = Header(None)) -> str:
    """Usuario autenticado; 401 caso contrario."""
    result = app_state.get_session_manager().authenticate(extract_token(authorization))
    if not result.authenticated:
        raise AuthenticationRequiredError(details={"reason": result.error})
    return result.user_id


# =============================================================================
# HELPERS
# =============================================================================


def _percentage(score: int, total_points: int) -> float:
    return round(ResponseScoringEngine.calculate_percentage(score, total_points), 2)


def _submission_result(outcome: SubmissionOutcome) -> SubmissionResult:
    report = outcome.report
    results = None
    if outcome.quiz.show_correct_answers:
        questions = outcome.quiz.question_map()
        results = [
            QuestionResultOut(
                question_id=r.question_id,
                answer=r.answer,
                is_correct=r.is_correct,
                points_awarded=r.points_awarded,
                points_possible=r.points_possible,
                question_text=questions[r.question_id].text,
                question_type=questions[r.question_id].type,
            )
            for r in report.results
        ]

    return SubmissionResult(
        id=outcome.response_id,
        quiz_id=outcome.quiz.id,
        score=report.score,
        total_points=report.total_points,
        percentage=report.rounded_percentage,
        is_passed=report.is_passed,
        correct_answers=report.correct_count,
        total_questions=report.total_questions,
        started_at=outcome.started_at,
        completed_at=outcome.completed_at,
        time_taken=outcome.time_taken,
        results=results,
    )


def _response_item(row: QuizResponse) -> QuizResponseItem:
    return QuizResponseItem(
        id=row.id,
        quiz_id=row.quiz_id,
        score=row.score,
        total_points=row.total_points,
        percentage=_percentage(row.score, row.total_points),
        is_passed=row.is_passed,
        started_at=row.started_at,
        completed_at=row.completed_at,
        time_taken=row.time_taken,
        quiz=QuizSummary(
            id=row.quiz.id,
            title=row.quiz.title,
            description=row.quiz.description,
            passing_score=row.quiz.passing_score,
        ),
    )


def _response_detail(row: QuizResponse, include_results: bool) -> QuizResponseDetail:
    item = _response_item(row)
    results = None
    if include_results:
        results = [
            QuestionResultOut(
                question_id=qr.question_id,
                answer=decode_answer(qr.answer),
                is_correct=qr.is_correct,
                points_awarded=qr.score,
                points_possible=qr.question.points,
                question_text=qr.question.text,
                question_type=qr.question.type,
            )
            for qr in row.question_responses
        ]
    return QuizResponseDetail(
        **item.model_dump(),
        correct_answers=sum(1 for qr in row.question_responses if qr.is_correct),
        total_questions=len(row.quiz.questions),
        participant_name=row.participant_name,
        results=results,
    )


# =============================================================================
# ENVIO E HISTORICO
# =============================================================================


@router.post("/response", response_model=SubmitQuizResponseResponse, status_code=201)
@limiter.limit(app_state.get_api_rate_limit)
async def submit_quiz_response(
    request: Request,
    payload: SubmitQuizResponseRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    """Registra uma tentativa e devolve a pontuacao.

    - Quiz precisa estar publicado (404)
    - Quiz com senha exige login (401)
    - Limite de tentativas por usuario (403)
    - Envios anonimos limitados por cliente (429)

    Resultados por questao so sao devolvidos quando o quiz revela as
    respostas corretas.
    """
    context = SubmissionContext(user_id=user_id, client_address=get_client_address(request))
    outcome = await app_state.get_submission_service().submit(payload, context)
    return SubmitQuizResponseResponse(data=_submission_result(outcome))


@router.get("/response", response_model=QuizResponseHistory)
@limiter.limit(app_state.get_api_rate_limit)
async def list_quiz_responses(
    request: Request,
    quiz_id: Optional[str] = Query(None, alias="quizId"),
    limit: Optional[int] = Query(None, ge=1),
    user_id: str = Depends(require_user_id),
):
    """Historico de tentativas do usuario, mais recentes primeiro."""
    config = get_config()
    limit = min(limit or config.history_default_limit, config.history_max_limit)

    cache = app_state.get_cache()
    cache_key = cache.dashboard_key(user_id, f"history:{quiz_id or '*'}:{limit}")
    cached = await cache.get(cache_key)
    if cached is not None:
        return QuizResponseHistory(data=cached)

    async with app_state.get_database().session() as session:
        rows = await QuizStore(session).list_responses(user_id, quiz_id=quiz_id, limit=limit)
        items = [_response_item(row) for row in rows]

    await cache.set(cache_key, items)
    return QuizResponseHistory(data=items)


@router.get("/response/{response_id}", response_model=QuizResponseDetailResponse)
@limiter.limit(app_state.get_api_rate_limit)
async def get_quiz_response(
    request: Request,
    response_id: str,
    user_id: str = Depends(require_user_id),
):
    """Detalhe de uma tentativa (participante ou dono do quiz)."""
    async with app_state.get_database().session() as session:
        row = await QuizStore(session).get_response(response_id)
        if row is None:
            raise ResponseNotFoundError(details={"response_id": response_id})

        is_owner = row.quiz.owner_id is not None and row.quiz.owner_id == user_id
        if row.user_id != user_id and not is_owner:
            raise AccessDeniedError(details={"response_id": response_id})

        detail = _response_detail(row, include_results=is_owner or row.quiz.show_correct_answers)

    return QuizResponseDetailResponse(data=detail)


# =============================================================================
# SENHA E ESTATISTICAS
# =============================================================================


@router.post("/{quiz_id}/verify-password", response_model=VerifyPasswordResponse)
@limiter.limit(app_state.get_api_rate_limit)
async def verify_quiz_password(request: Request, quiz_id: str, payload: VerifyPasswordRequest):
    """Confere a senha de um quiz protegido.

    Tentativas sao limitadas por quiz e cliente (padrao: 5 a cada 15 min).
    """
    async with app_state.get_database().session() as session:
        quiz = await QuizStore(session).get_quiz_header(quiz_id)

    if quiz is None or quiz.status != QuizStatus.PUBLISHED.value:
        raise QuizNotFoundError(details={"quiz_id": quiz_id})
    if not quiz.password:
        raise ValidationError("Este quiz não exige senha", details={"quiz_id": quiz_id})

    client = get_client_address(request)
    result = app_state.get_password_limiter().check(f"{PASSWORD_THROTTLE_PREFIX}:{quiz_id}:{client}")
    if not result.allowed:
        logger.warning("Tentativas de senha bloqueadas", quiz_id=quiz_id, client=client)
        raise ThrottledError(
            "Muitas tentativas de senha. Tente novamente mais tarde.",
            details={"quiz_id": quiz_id},
            retry_after=result.retry_after,
        )

    if not secrets.compare_digest(payload.password.encode(), quiz.password.encode()):
        raise IncorrectPasswordError(details={"quiz_id": quiz_id, "remaining": result.remaining})

    return VerifyPasswordResponse()


@router.get("/{quiz_id}/stats", response_model=QuizStatsResponse)
@limiter.limit(app_state.get_api_rate_limit)
async def get_quiz_stats(
    request: Request,
    quiz_id: str,
    user_id: str = Depends(require_user_id),
):
    """Agregados das tentativas (apenas o dono do quiz)."""
    async with app_state.get_database().session() as session:
        store = QuizStore(session)
        quiz = await store.get_quiz_header(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(details={"quiz_id": quiz_id})
        if quiz.owner_id != user_id:
            raise AccessDeniedError(details={"quiz_id": quiz_id})

        cache = app_state.get_cache()
        cache_key = cache.quiz_key(quiz_id, "stats")
        stats = await cache.get(cache_key)
        if stats is None:
            stats = QuizStats(**await store.quiz_stats(quiz_id, quiz.passing_score))
            await cache.set(cache_key, stats)

    return QuizStatsResponse(data=stats)
