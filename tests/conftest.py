# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Banco SQLite temporario por teste, cliente HTTP e fabrica de quizzes
# =============================================================================

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import app_state
from core.config import reload_config
from grading.models.answer_keys import SingleChoiceKey, TrueFalseKey
from grading.models.domain import QuestionSpec, QuizSpec
from grading.models.schemas import QuizDraft
from grading.storage.quiz_store import QuizStore

# =============================================================================
# FIXTURES DE BANCO
# =============================================================================


@pytest_asyncio.fixture
async def database(tmp_path, monkeypatch):
    """Banco SQLite em arquivo temporario com tabelas criadas."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'examforge_test.db'}")
    reload_config()
    await app_state.reset_state()

    db = await app_state.init_database()
    yield db

    await app_state.reset_state()


@pytest_asyncio.fixture
async def create_quiz(database):
    """Fabrica de quizzes persistidos."""

    async def _create(**fields: Any):
        draft = QuizDraft(**{"title": "Quiz de teste", **fields})
        async with database.session() as session, session.begin():
            return await QuizStore(session).create_quiz(draft)

    return _create


@pytest_asyncio.fixture
async def sample_quiz(create_quiz):
    """Q1 escolha unica (10 pts, correta "B") e Q2 verdadeiro/falso (5 pts, true)."""
    return await create_quiz(
        id="quiz-basic",
        owner_id="owner-1",
        questions=[
            {
                "id": "q1",
                "type": "MULTIPLE_CHOICE",
                "text": "Qual alternativa?",
                "points": 10,
                "options": [
                    {"id": "A", "text": "Alternativa A"},
                    {"id": "B", "text": "Alternativa B", "is_correct": True},
                ],
            },
            {"id": "q2", "type": "TRUE_FALSE", "text": "Verdadeiro?", "points": 5, "correct_answer": True},
        ],
    )


# =============================================================================
# FIXTURES DO FASTAPI
# =============================================================================


@pytest_asyncio.fixture
async def client(database):
    """Cliente assincrono (o lifespan nao roda no ASGITransport)."""
    from server import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(database):
    """Gera header Authorization para um user_id."""

    def _headers(user_id: str) -> dict[str, str]:
        token, _ = app_state.get_session_manager().create_session(user_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def submission_payload():
    """Monta o corpo de envio no formato do frontend (camelCase)."""

    def _payload(quiz_id: str, answers: dict[str, Any], **extra: Any) -> dict[str, Any]:
        started = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        body = {
            "quizId": quiz_id,
            "responses": [{"questionId": qid, "answer": answer} for qid, answer in answers.items()],
            "startedAt": started.isoformat(),
            "completedAt": (started + timedelta(seconds=95)).isoformat(),
        }
        body.update(extra)
        return body

    return _payload


# =============================================================================
# FIXTURES DE DOMINIO (sem banco)
# =============================================================================


@pytest.fixture
def basic_quiz_spec() -> QuizSpec:
    """Mesmo quiz de sample_quiz, montado em memoria."""
    return QuizSpec(
        id="quiz-basic",
        title="Quiz de teste",
        questions=(
            QuestionSpec(
                id="q1",
                type="MULTIPLE_CHOICE",
                points=10,
                answer_key=SingleChoiceKey(option_id="B"),
            ),
            QuestionSpec(id="q2", type="TRUE_FALSE", points=5, answer_key=TrueFalseKey(value=True)),
        ),
    )
