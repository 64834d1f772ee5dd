#!/usr/bin/env python3
"""
Cria um quiz de demonstracao com todos os tipos de questao.

Uso:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --owner user-1 --passing-score 60

O banco usado e o de DATABASE_URL (padrao: sqlite+aiosqlite:///./examforge.db).
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Adicionar o diretorio pai ao path
sys.path.insert(0, str(Path(__file__).parent.parent))

import app_state
from core.config import get_config
from core.logger import configure_logging
from grading.models.schemas import QuizDraft
from grading.storage.quiz_store import QuizStore

DEMO_QUIZ_ID = "demo-quiz"

DEMO_QUESTIONS = [
    {
        "id": "demo-tf",
        "type": "TRUE_FALSE",
        "text": "A agua ferve a 100 °C ao nivel do mar.",
        "points": 5,
        "correct_answer": True,
    },
    {
        "id": "demo-mc",
        "type": "MULTIPLE_CHOICE",
        "text": "Qual e a capital da Franca?",
        "points": 10,
        "options": [
            {"id": "demo-mc-a", "text": "Lyon"},
            {"id": "demo-mc-b", "text": "Paris", "is_correct": True},
            {"id": "demo-mc-c", "text": "Marselha"},
        ],
    },
    {
        "id": "demo-cb",
        "type": "CHECKBOX",
        "text": "Quais sao numeros primos?",
        "points": 10,
        "options": [
            {"id": "demo-cb-2", "text": "2", "is_correct": True},
            {"id": "demo-cb-4", "text": "4"},
            {"id": "demo-cb-7", "text": "7", "is_correct": True},
        ],
    },
    {
        "id": "demo-sa",
        "type": "SHORT_ANSWER",
        "text": "Qual o simbolo quimico do ouro?",
        "points": 5,
        "correct_answer": "Au",
    },
    {
        "id": "demo-num",
        "type": "NUMERIC",
        "text": "Valor de pi com duas casas decimais.",
        "points": 5,
        "correct_answer": 3.14,
        "tolerance": 0.01,
    },
    {
        "id": "demo-fib",
        "type": "FILL_IN_BLANK",
        "text": "A capital da Alemanha e ___ e a da Italia e ___.",
        "points": 10,
        "correct_answer": ["Berlim", "Roma"],
    },
    {
        "id": "demo-match",
        "type": "MATCHING",
        "text": "Associe o pais a sua capital.",
        "points": 10,
        "correct_answer": {"Brasil": "Brasilia", "Peru": "Lima"},
    },
    {
        "id": "demo-sort",
        "type": "SORTING",
        "text": "Ordene do menor para o maior planeta.",
        "points": 10,
        "correct_answer": ["Mercurio", "Marte", "Terra"],
    },
    {
        "id": "demo-diagram",
        "type": "DIAGRAM",
        "text": "Marque o coracao no diagrama.",
        "points": 5,
        "correct_answer": {"x": 120, "y": 80, "label": "Coracao"},
    },
]


def parse_args():
    parser = argparse.ArgumentParser(
        description="Cria quiz de demonstracao",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--owner", default="demo-owner", help="user_id do dono do quiz")
    parser.add_argument("--passing-score", type=float, default=70.0, help="Nota de corte (0-100)")
    parser.add_argument("--password", default=None, help="Senha do quiz (opcional)")
    parser.add_argument("--max-attempts", type=int, default=None, help="Limite de tentativas")
    parser.add_argument(
        "--show-answers", action="store_true", help="Revela respostas corretas apos o envio"
    )
    return parser.parse_args()


async def main():
    args = parse_args()
    config = get_config()
    configure_logging(config.log_level, "text")

    draft = QuizDraft(
        id=DEMO_QUIZ_ID,
        title="Quiz de demonstracao",
        description="Um exemplo de cada tipo de questao",
        passing_score=args.passing_score,
        show_correct_answers=args.show_answers,
        password=args.password,
        max_attempts=args.max_attempts,
        owner_id=args.owner,
        questions=DEMO_QUESTIONS,
    )

    db = await app_state.init_database()
    try:
        async with db.session() as session, session.begin():
            store = QuizStore(session)
            if await store.get_quiz_header(DEMO_QUIZ_ID) is not None:
                print(f"Quiz {DEMO_QUIZ_ID} ja existe em {config.database_url}")
                return
            quiz = await store.create_quiz(draft)
    finally:
        await app_state.reset_state()

    total = sum(q.points for q in quiz.questions)
    print(f"Quiz criado: {quiz.id} ({len(quiz.questions)} questoes, {total} pontos)")


if __name__ == "__main__":
    asyncio.run(main())
