"""Grading Models - Enums, gabaritos, schemas e estruturas de dominio."""

from .answer_keys import (
    KEY_TYPES,
    AnswerKey,
    ChoiceSetKey,
    DiagramKey,
    FillInBlankKey,
    MatchingKey,
    NumericKey,
    ShortAnswerKey,
    SingleChoiceKey,
    SortingKey,
    TrueFalseKey,
    parse_answer_key,
    serialize_correct_answer,
)
from .domain import (
    AnsweredQuestion,
    Evaluation,
    GradeReport,
    OptionSpec,
    QuestionResult,
    QuestionSpec,
    QuizSpec,
)
from .enums import QuestionType, QuizStatus
from .schemas import (
    AnswerSubmission,
    OptionDraft,
    QuestionDraft,
    QuizDraft,
    SubmitQuizResponseRequest,
)

__all__ = [
    # Enums
    "QuestionType",
    "QuizStatus",
    # Gabaritos
    "AnswerKey",
    "KEY_TYPES",
    "TrueFalseKey",
    "SingleChoiceKey",
    "ChoiceSetKey",
    "ShortAnswerKey",
    "NumericKey",
    "FillInBlankKey",
    "MatchingKey",
    "SortingKey",
    "DiagramKey",
    "parse_answer_key",
    "serialize_correct_answer",
    # Dominio
    "OptionSpec",
    "QuestionSpec",
    "QuizSpec",
    "AnsweredQuestion",
    "Evaluation",
    "QuestionResult",
    "GradeReport",
    # Schemas
    "AnswerSubmission",
    "SubmitQuizResponseRequest",
    "OptionDraft",
    "QuestionDraft",
    "QuizDraft",
]
