"""Grading Engines - Correcao e registro de tentativas."""

from .evaluator import AnswerEvaluator
from .scoring_engine import ResponseScoringEngine
from .submission import SubmissionContext, SubmissionOutcome, SubmissionService

__all__ = [
    "AnswerEvaluator",
    "ResponseScoringEngine",
    "SubmissionContext",
    "SubmissionOutcome",
    "SubmissionService",
]
