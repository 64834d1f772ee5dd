"""Grading Storage - Persistencia em banco relacional."""

from .database import Database
from .models import Base, Question, QuestionOption, QuestionResponse, Quiz, QuizResponse
from .quiz_store import QuizStore, decode_answer, quiz_to_spec

__all__ = [
    "Database",
    "Base",
    "Quiz",
    "Question",
    "QuestionOption",
    "QuizResponse",
    "QuestionResponse",
    "QuizStore",
    "decode_answer",
    "quiz_to_spec",
]
