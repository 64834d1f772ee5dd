"""Grading Module - Correcao e registro de tentativas de quiz.

Arquitetura:
- models/: Enums, gabaritos tipados, schemas Pydantic, estruturas de dominio
- engine/: AnswerEvaluator, ResponseScoringEngine, SubmissionService
- storage/: Tabelas SQLAlchemy, Database, QuizStore
- router.py: FastAPI endpoints
"""
