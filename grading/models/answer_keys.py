"""Gabaritos tipados por tipo de questao.

O gabarito e armazenado como texto no banco (JSON, texto puro ou lista
separada por "|"). Ao carregar a questao, o texto e convertido em uma das
variantes abaixo; dados malformados geram InvalidAnswerKeyError na carga,
nunca durante a correcao.
"""

import json
import math
from typing import Annotated, Any, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import InvalidAnswerKeyError

from .enums import QuestionType

BLANK_SEPARATOR = "|"


class _AnswerKeyBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TrueFalseKey(_AnswerKeyBase):
    type: Literal["TRUE_FALSE"] = "TRUE_FALSE"
    value: bool


class SingleChoiceKey(_AnswerKeyBase):
    type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    option_id: str = Field(..., min_length=1)


class ChoiceSetKey(_AnswerKeyBase):
    type: Literal["CHECKBOX"] = "CHECKBOX"
    option_ids: list[str] = Field(..., min_length=1)


class ShortAnswerKey(_AnswerKeyBase):
    type: Literal["SHORT_ANSWER"] = "SHORT_ANSWER"
    text: str = Field(..., min_length=1)


class NumericKey(_AnswerKeyBase):
    type: Literal["NUMERIC"] = "NUMERIC"
    value: float
    tolerance: float = Field(default=0.0, ge=0)

    @field_validator("value", "tolerance")
    @classmethod
    def check_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("valor numerico deve ser finito")
        return v


class FillInBlankKey(_AnswerKeyBase):
    type: Literal["FILL_IN_BLANK"] = "FILL_IN_BLANK"
    blanks: list[str] = Field(..., min_length=1)


class MatchingKey(_AnswerKeyBase):
    type: Literal["MATCHING"] = "MATCHING"
    pairs: dict[str, str] = Field(..., min_length=1)


class SortingKey(_AnswerKeyBase):
    type: Literal["SORTING"] = "SORTING"
    order: list[str] = Field(..., min_length=1)


class DiagramKey(_AnswerKeyBase):
    type: Literal["DIAGRAM"] = "DIAGRAM"
    x: float
    y: float
    label: str


AnswerKey = Annotated[
    Union[
        TrueFalseKey,
        SingleChoiceKey,
        ChoiceSetKey,
        ShortAnswerKey,
        NumericKey,
        FillInBlankKey,
        MatchingKey,
        SortingKey,
        DiagramKey,
    ],
    Field(discriminator="type"),
]

# Tipo de questao -> variante de gabarito
KEY_TYPES: dict[QuestionType, type[BaseModel]] = {
    QuestionType.TRUE_FALSE: TrueFalseKey,
    QuestionType.MULTIPLE_CHOICE: SingleChoiceKey,
    QuestionType.CHECKBOX: ChoiceSetKey,
    QuestionType.SHORT_ANSWER: ShortAnswerKey,
    QuestionType.NUMERIC: NumericKey,
    QuestionType.FILL_IN_BLANK: FillInBlankKey,
    QuestionType.MATCHING: MatchingKey,
    QuestionType.SORTING: SortingKey,
    QuestionType.DIAGRAM: DiagramKey,
}

_adapter = TypeAdapter(AnswerKey)


def _invalid(question_type: QuestionType, reason: str, raw: Any = None) -> InvalidAnswerKeyError:
    details = {"question_type": question_type.value, "reason": reason}
    if raw is not None:
        details["raw"] = str(raw)[:100]
    return InvalidAnswerKeyError(details=details)


def _load_json(question_type: QuestionType, raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        raise _invalid(question_type, "JSON invalido", raw) from None


def _parse_blanks(raw: str) -> list[str]:
    text = raw.strip()
    if text.startswith("["):
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, list):
            return data
    return raw.split(BLANK_SEPARATOR)


def parse_answer_key(
    question_type: str,
    correct_answer: Optional[str],
    correct_option_ids: Sequence[str] = (),
    tolerance: Optional[float] = None,
) -> Optional[AnswerKey]:
    """Converte o gabarito armazenado na variante tipada.

    Args:
        question_type: Tag armazenada na questao
        correct_answer: Texto do gabarito (pode ser None)
        correct_option_ids: IDs das alternativas marcadas como corretas
        tolerance: Tolerancia para questoes numericas

    Returns:
        Variante do gabarito, ou None quando nao ha gabarito (correcao
        manual) ou o tipo e desconhecido.

    Raises:
        InvalidAnswerKeyError: gabarito presente mas malformado.
    """
    qtype = QuestionType.parse(question_type)
    if qtype is None:
        return None

    option_ids = [oid for oid in correct_option_ids if oid]
    raw = correct_answer if correct_answer not in (None, "") else None

    if qtype == QuestionType.MULTIPLE_CHOICE:
        if option_ids:
            data: dict[str, Any] = {"option_id": option_ids[0]}
        elif raw is not None:
            data = {"option_id": raw}
        else:
            return None
    elif qtype == QuestionType.CHECKBOX:
        if option_ids:
            data = {"option_ids": option_ids}
        elif raw is not None:
            data = {"option_ids": _load_json(qtype, raw)}
        else:
            return None
    elif raw is None:
        return None
    elif qtype == QuestionType.TRUE_FALSE:
        normalized = raw.strip().lower()
        if normalized not in ("true", "false"):
            raise _invalid(qtype, "esperado true ou false", raw)
        data = {"value": normalized == "true"}
    elif qtype == QuestionType.SHORT_ANSWER:
        data = {"text": raw}
    elif qtype == QuestionType.NUMERIC:
        try:
            value = float(raw)
        except ValueError:
            raise _invalid(qtype, "valor nao numerico", raw) from None
        data = {"value": value, "tolerance": tolerance or 0.0}
    elif qtype == QuestionType.FILL_IN_BLANK:
        data = {"blanks": _parse_blanks(raw)}
    elif qtype == QuestionType.MATCHING:
        data = {"pairs": _load_json(qtype, raw)}
    elif qtype == QuestionType.SORTING:
        data = {"order": _load_json(qtype, raw)}
    else:
        loaded = _load_json(qtype, raw)
        if not isinstance(loaded, dict):
            raise _invalid(qtype, "esperado objeto {x, y, label}", raw)
        data = loaded

    try:
        return _adapter.validate_python({**data, "type": qtype.value})
    except PydanticValidationError as e:
        raise _invalid(qtype, e.errors()[0].get("msg", "formato invalido"), raw) from None


def serialize_correct_answer(question_type: QuestionType, value: Any) -> Optional[str]:
    """Converte um gabarito em Python para o texto armazenado no banco."""
    if value is None:
        return None
    if question_type == QuestionType.TRUE_FALSE and isinstance(value, bool):
        return "true" if value else "false"
    if question_type in (
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.SHORT_ANSWER,
    ):
        return str(value)
    if question_type == QuestionType.NUMERIC:
        return str(value)
    if question_type == QuestionType.FILL_IN_BLANK and isinstance(value, (list, tuple)):
        return BLANK_SEPARATOR.join(str(v) for v in value)
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
