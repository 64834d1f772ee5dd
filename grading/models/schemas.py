"""Grading Schemas - Modelos Pydantic para request/response.

Os campos aceitam snake_case e camelCase na entrada; a saida usa camelCase,
o formato consumido pelo frontend.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)
from pydantic.alias_generators import to_camel
from typing_extensions import TypedDict

from .enums import QuestionType, QuizStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DiagramPoint(TypedDict):
    """Ponto marcado em questao de diagrama."""

    x: float
    y: float
    label: str


# Formatos aceitos para uma resposta (o formato esperado depende do tipo)
AnswerValue = Union[
    StrictBool,  # TRUE_FALSE
    StrictInt,  # NUMERIC
    StrictFloat,  # NUMERIC
    StrictStr,  # MULTIPLE_CHOICE, SHORT_ANSWER, TRUE_FALSE, NUMERIC
    list[StrictStr],  # CHECKBOX, SORTING, FILL_IN_BLANK
    dict[str, StrictStr],  # MATCHING
    DiagramPoint,  # DIAGRAM
]


# =============================================================================
# SUBMISSAO
# =============================================================================


class AnswerSubmission(CamelModel):
    """Resposta a uma questao."""

    question_id: str = Field(..., min_length=1, description="ID da questao")
    answer: AnswerValue = Field(..., description="Resposta no formato do tipo da questao")
    time_spent: Optional[float] = Field(None, ge=0, description="Segundos gastos na questao")


class SubmitQuizResponseRequest(CamelModel):
    """Request de envio de uma tentativa."""

    quiz_id: str = Field(..., min_length=1, description="ID do quiz")
    responses: list[AnswerSubmission] = Field(
        ..., description="Respostas na ordem em que foram dadas (pode ser vazia)"
    )
    participant_name: Optional[str] = Field(None, max_length=200)
    participant_email: Optional[str] = Field(
        None, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
    )
    started_at: datetime = Field(..., description="Inicio da tentativa")
    completed_at: datetime = Field(..., description="Conclusao da tentativa")

    @model_validator(mode="after")
    def check_timestamps(self) -> "SubmitQuizResponseRequest":
        try:
            reversed_range = self.completed_at < self.started_at
        except TypeError:
            raise ValueError("started_at e completed_at devem usar o mesmo formato de fuso") from None
        if reversed_range:
            raise ValueError("completed_at deve ser posterior a started_at")
        return self


class QuestionResultOut(CamelModel):
    """Resultado por questao."""

    question_id: str
    answer: Any
    is_correct: bool
    points_awarded: int
    points_possible: int
    question_text: Optional[str] = None
    question_type: Optional[str] = None


class SubmissionResult(CamelModel):
    """Dados da tentativa registrada."""

    id: str
    quiz_id: str
    score: int = Field(..., description="Pontos obtidos")
    total_points: int = Field(..., description="Pontos possiveis das questoes respondidas")
    percentage: float = Field(..., description="Percentual de aproveitamento (0-100)")
    is_passed: Optional[bool] = Field(None, description="None quando nao ha nota de corte")
    correct_answers: int
    total_questions: int
    started_at: datetime
    completed_at: datetime
    time_taken: Optional[int] = Field(None, description="Duracao em segundos")
    results: Optional[list[QuestionResultOut]] = Field(
        None, description="Presente apenas se o quiz revela as respostas"
    )


class SubmitQuizResponseResponse(CamelModel):
    success: bool = True
    data: SubmissionResult


# =============================================================================
# HISTORICO E DETALHE
# =============================================================================


class QuizSummary(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    passing_score: Optional[float] = None


class QuizResponseItem(CamelModel):
    """Tentativa no historico do usuario."""

    id: str
    quiz_id: str
    score: int
    total_points: int
    percentage: float
    is_passed: Optional[bool] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    time_taken: Optional[int] = None
    quiz: QuizSummary


class QuizResponseHistory(CamelModel):
    success: bool = True
    data: list[QuizResponseItem]


class QuizResponseDetail(QuizResponseItem):
    """Tentativa com resultados por questao."""

    correct_answers: int
    total_questions: int
    participant_name: Optional[str] = None
    results: Optional[list[QuestionResultOut]] = None


class QuizResponseDetailResponse(CamelModel):
    success: bool = True
    data: QuizResponseDetail


# =============================================================================
# SENHA E ESTATISTICAS
# =============================================================================


class VerifyPasswordRequest(CamelModel):
    password: str = Field(..., min_length=1, max_length=200)


class VerifyPasswordResponse(CamelModel):
    success: bool = True


class QuizStats(CamelModel):
    """Agregados das tentativas de um quiz."""

    quiz_id: str
    attempts: int
    average_percentage: float
    pass_rate: Optional[float] = Field(None, description="None quando nao ha nota de corte")


class QuizStatsResponse(CamelModel):
    success: bool = True
    data: QuizStats


# =============================================================================
# AUTORIA (seed e testes)
# =============================================================================


class OptionDraft(CamelModel):
    id: Optional[str] = None
    text: str
    is_correct: bool = False


class QuestionDraft(CamelModel):
    """Questao a ser criada; correct_answer em formato Python."""

    id: Optional[str] = None
    type: QuestionType
    text: str = ""
    points: int = Field(default=1, ge=0)
    correct_answer: Any = None
    tolerance: Optional[float] = Field(None, ge=0)
    options: list[OptionDraft] = Field(default_factory=list)


class QuizDraft(CamelModel):
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: QuizStatus = QuizStatus.PUBLISHED
    passing_score: Optional[float] = Field(None, ge=0, le=100)
    show_correct_answers: bool = False
    password: Optional[str] = None
    max_attempts: Optional[int] = Field(None, ge=1)
    owner_id: Optional[str] = None
    questions: list[QuestionDraft] = Field(default_factory=list)
