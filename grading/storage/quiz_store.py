"""Quiz Store - Acesso ao banco para quizzes e tentativas."""

import json
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.logger import get_logger

from ..models.answer_keys import parse_answer_key, serialize_correct_answer
from ..models.domain import GradeReport, OptionSpec, QuestionResult, QuestionSpec, QuizSpec
from ..models.enums import QuizStatus
from ..models.schemas import QuizDraft
from .models import Question, QuestionOption, QuestionResponse, Quiz, QuizResponse

logger = get_logger("quiz_store")


def question_to_spec(row: Question) -> QuestionSpec:
    """Converte a linha da questao em QuestionSpec com gabarito tipado.

    Raises:
        InvalidAnswerKeyError: gabarito armazenado malformado
    """
    options = tuple(
        OptionSpec(id=o.id, text=o.text, is_correct=o.is_correct, order=o.order)
        for o in row.options
    )
    answer_key = parse_answer_key(
        row.type,
        row.correct_answer,
        correct_option_ids=[o.id for o in options if o.is_correct],
        tolerance=row.tolerance,
    )
    return QuestionSpec(
        id=row.id,
        type=row.type,
        points=row.points,
        answer_key=answer_key,
        text=row.text,
        order=row.order,
        options=options,
    )


def quiz_to_spec(row: Quiz) -> QuizSpec:
    return QuizSpec(
        id=row.id,
        title=row.title,
        status=row.status,
        questions=tuple(question_to_spec(q) for q in row.questions),
        passing_score=row.passing_score,
        show_correct_answers=row.show_correct_answers,
        password=row.password,
        max_attempts=row.max_attempts,
        owner_id=row.owner_id,
        description=row.description,
    )


def decode_answer(raw: Optional[str]) -> Any:
    """Recupera a resposta armazenada como JSON."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class QuizStore:
    """Repositorio de quizzes e tentativas sobre uma AsyncSession.

    O store nao controla transacoes: quem o usa abre `session.begin()` e
    decide quando confirmar. Escritas fazem apenas flush.

    Example:
        >>> async with db.session() as session, session.begin():
        ...     store = QuizStore(session)
        ...     quiz = await store.load_published_quiz("quiz-1")
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # QUIZZES
    # =========================================================================

    def _quiz_query(self, quiz_id: str):
        return (
            select(Quiz)
            .where(Quiz.id == quiz_id)
            .options(selectinload(Quiz.questions).selectinload(Question.options))
        )

    async def get_quiz_header(self, quiz_id: str) -> Optional[Quiz]:
        """Linha do quiz sem questoes (senha, dono, nota de corte)."""
        return await self.session.get(Quiz, quiz_id)

    async def get_quiz(self, quiz_id: str) -> Optional[QuizSpec]:
        """Carrega quiz em qualquer status."""
        row = (await self.session.execute(self._quiz_query(quiz_id))).scalar_one_or_none()
        return quiz_to_spec(row) if row else None

    async def load_published_quiz(self, quiz_id: str) -> Optional[QuizSpec]:
        """Carrega quiz publicado com questoes, alternativas e gabaritos.

        Returns:
            QuizSpec, ou None se o quiz nao existe ou nao esta publicado
        """
        query = self._quiz_query(quiz_id).where(Quiz.status == QuizStatus.PUBLISHED.value)
        row = (await self.session.execute(query)).scalar_one_or_none()
        if row is None:
            logger.debug("Quiz publicado nao encontrado", quiz_id=quiz_id)
            return None
        return quiz_to_spec(row)

    async def create_quiz(self, draft: QuizDraft) -> QuizSpec:
        """Cria quiz com questoes e alternativas.

        Gabaritos sao validados antes da escrita; um gabarito malformado
        gera InvalidAnswerKeyError e nada e gravado.
        """
        quiz = Quiz(
            title=draft.title,
            description=draft.description,
            status=draft.status.value,
            passing_score=draft.passing_score,
            show_correct_answers=draft.show_correct_answers,
            password=draft.password,
            max_attempts=draft.max_attempts,
            owner_id=draft.owner_id,
            questions=[],
        )
        if draft.id:
            quiz.id = draft.id

        for order, q in enumerate(draft.questions):
            correct_answer = serialize_correct_answer(q.type, q.correct_answer)
            parse_answer_key(
                q.type.value,
                correct_answer,
                correct_option_ids=[opt.id or "pending" for opt in q.options if opt.is_correct],
                tolerance=q.tolerance,
            )

            question = Question(
                type=q.type.value,
                text=q.text,
                points=q.points,
                order=order,
                correct_answer=correct_answer,
                tolerance=q.tolerance,
                options=[],
            )
            if q.id:
                question.id = q.id
            for opt_order, opt in enumerate(q.options):
                option = QuestionOption(text=opt.text, is_correct=opt.is_correct, order=opt_order)
                if opt.id:
                    option.id = opt.id
                question.options.append(option)
            quiz.questions.append(question)

        self.session.add(quiz)
        await self.session.flush()

        spec = quiz_to_spec(quiz)
        logger.info("Quiz criado", quiz_id=spec.id, questions=len(spec.questions))
        return spec

    # =========================================================================
    # TENTATIVAS
    # =========================================================================

    async def count_attempts(self, quiz_id: str, user_id: str) -> int:
        query = select(func.count(QuizResponse.id)).where(
            QuizResponse.quiz_id == quiz_id, QuizResponse.user_id == user_id
        )
        return (await self.session.execute(query)).scalar_one()

    async def create_attempt(
        self,
        quiz_id: str,
        user_id: Optional[str],
        started_at: datetime,
        completed_at: datetime,
        participant_name: Optional[str] = None,
        participant_email: Optional[str] = None,
    ) -> QuizResponse:
        """Insere a tentativa com pontuacao zerada."""
        response = QuizResponse(
            quiz_id=quiz_id,
            user_id=user_id,
            participant_name=participant_name,
            participant_email=participant_email,
            score=0,
            total_points=0,
            started_at=started_at,
            completed_at=completed_at,
        )
        self.session.add(response)
        await self.session.flush()
        return response

    async def add_result(self, response_id: str, position: int, result: QuestionResult) -> None:
        self.session.add(
            QuestionResponse(
                response_id=response_id,
                question_id=result.question_id,
                position=position,
                answer=json.dumps(result.answer, ensure_ascii=False),
                is_correct=result.is_correct,
                score=result.points_awarded,
                time_spent=result.time_spent,
            )
        )
        await self.session.flush()

    async def finalize_attempt(
        self, response: QuizResponse, report: GradeReport, time_taken: Optional[int]
    ) -> QuizResponse:
        """Grava pontuacao, resultado e duracao na tentativa."""
        response.score = report.score
        response.total_points = report.total_points
        response.is_passed = report.is_passed
        response.time_taken = time_taken
        await self.session.flush()
        return response

    async def list_responses(
        self, user_id: str, quiz_id: Optional[str] = None, limit: int = 10
    ) -> list[QuizResponse]:
        """Tentativas do usuario, mais recentes primeiro."""
        query = select(QuizResponse).where(QuizResponse.user_id == user_id)
        if quiz_id:
            query = query.where(QuizResponse.quiz_id == quiz_id)
        query = (
            query.options(selectinload(QuizResponse.quiz))
            .order_by(QuizResponse.completed_at.desc(), QuizResponse.created_at.desc())
            .limit(limit)
        )
        return list((await self.session.execute(query)).scalars().all())

    async def get_response(self, response_id: str) -> Optional[QuizResponse]:
        """Tentativa com quiz e respostas por questao carregados."""
        query = (
            select(QuizResponse)
            .where(QuizResponse.id == response_id)
            .options(
                selectinload(QuizResponse.quiz)
                .selectinload(Quiz.questions)
                .selectinload(Question.options),
                selectinload(QuizResponse.question_responses).selectinload(
                    QuestionResponse.question
                ),
            )
        )
        return (await self.session.execute(query)).scalar_one_or_none()

    async def quiz_stats(self, quiz_id: str, passing_score: Optional[float]) -> dict[str, Any]:
        """Agregados das tentativas de um quiz.

        Returns:
            Dict com attempts, average_percentage e pass_rate (None sem nota
            de corte)
        """
        percentage = case(
            (QuizResponse.total_points > 0, QuizResponse.score * 100.0 / QuizResponse.total_points),
            else_=0.0,
        )
        passed = case((QuizResponse.is_passed.is_(True), 1), else_=0)
        query = select(
            func.count(QuizResponse.id),
            func.avg(percentage),
            func.sum(passed),
        ).where(QuizResponse.quiz_id == quiz_id)

        attempts, average, passed_count = (await self.session.execute(query)).one()
        attempts = attempts or 0

        pass_rate: Optional[float] = None
        if passing_score is not None:
            pass_rate = round((passed_count or 0) / attempts * 100, 2) if attempts else 0.0

        return {
            "quiz_id": quiz_id,
            "attempts": attempts,
            "average_percentage": round(float(average or 0.0), 2),
            "pass_rate": pass_rate,
        }
