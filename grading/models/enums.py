"""Grading Enums - Tipos de questao e status do quiz."""

from enum import Enum


class QuestionType(str, Enum):
    """Tipos de questao suportados pela correcao automatica."""

    TRUE_FALSE = "TRUE_FALSE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"  # escolha unica
    CHECKBOX = "CHECKBOX"  # multipla selecao
    SHORT_ANSWER = "SHORT_ANSWER"
    NUMERIC = "NUMERIC"
    FILL_IN_BLANK = "FILL_IN_BLANK"
    MATCHING = "MATCHING"
    SORTING = "SORTING"
    DIAGRAM = "DIAGRAM"

    @classmethod
    def parse(cls, value: str) -> "QuestionType | None":
        """Converte tag armazenada; None para tipos desconhecidos."""
        try:
            return cls(value)
        except ValueError:
            return None


class QuizStatus(str, Enum):
    """Ciclo de vida do quiz."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"
