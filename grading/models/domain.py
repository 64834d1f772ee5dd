"""Grading Domain - Estruturas imutaveis usadas pela correcao.

Estas estruturas sao montadas a partir das linhas do banco (ver
storage/quiz_store.py) e consumidas pelo avaliador e pelo agregador, que
nao fazem I/O.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .answer_keys import AnswerKey
from .enums import QuestionType, QuizStatus


@dataclass(frozen=True)
class OptionSpec:
    """Alternativa de uma questao de escolha."""

    id: str
    text: str
    is_correct: bool = False
    order: int = 0


@dataclass(frozen=True)
class QuestionSpec:
    """Questao pronta para correcao.

    Attributes:
        id: ID da questao
        type: Tag armazenada (pode ser desconhecida)
        points: Pontos atribuidos quando correta
        answer_key: Gabarito tipado; None quando a correcao e manual
    """

    id: str
    type: str
    points: int
    answer_key: Optional[AnswerKey] = None
    text: str = ""
    order: int = 0
    options: tuple[OptionSpec, ...] = ()

    @property
    def question_type(self) -> Optional[QuestionType]:
        return QuestionType.parse(self.type)


@dataclass(frozen=True)
class QuizSpec:
    """Quiz carregado para uma tentativa (imutavel durante a correcao)."""

    id: str
    title: str
    status: str = QuizStatus.PUBLISHED.value
    questions: tuple[QuestionSpec, ...] = ()
    passing_score: Optional[float] = None
    show_correct_answers: bool = False
    password: Optional[str] = None
    max_attempts: Optional[int] = None
    owner_id: Optional[str] = None
    description: Optional[str] = None

    @property
    def requires_password(self) -> bool:
        return bool(self.password)

    @property
    def is_published(self) -> bool:
        return self.status == QuizStatus.PUBLISHED.value

    def question_map(self) -> dict[str, QuestionSpec]:
        return {q.id: q for q in self.questions}


@dataclass(frozen=True)
class AnsweredQuestion:
    """Par (questao, resposta) enviado pelo participante."""

    question_id: str
    answer: Any
    time_spent: Optional[float] = None


@dataclass(frozen=True)
class Evaluation:
    """Resultado da avaliacao de uma resposta."""

    is_correct: bool
    points_awarded: int


@dataclass(frozen=True)
class QuestionResult:
    """Resultado por questao dentro de uma tentativa."""

    question_id: str
    answer: Any
    is_correct: bool
    points_awarded: int
    points_possible: int
    time_spent: Optional[float] = None


@dataclass
class GradeReport:
    """Pontuacao agregada de uma tentativa.

    Attributes:
        score: Soma dos pontos obtidos
        total_points: Soma dos pontos das questoes respondidas
        percentage: score * 100 / total_points (0 quando total_points == 0)
        is_passed: None quando o quiz nao define nota de corte
    """

    score: int = 0
    total_points: int = 0
    percentage: float = 0.0
    is_passed: Optional[bool] = None
    correct_count: int = 0
    answered_count: int = 0
    total_questions: int = 0
    results: list[QuestionResult] = field(default_factory=list)

    @property
    def rounded_percentage(self) -> float:
        return round(self.percentage, 2)
