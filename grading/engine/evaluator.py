"""Answer Evaluator - Decide se uma resposta esta correta."""

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from core.logger import get_logger

from ..models.answer_keys import (
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
)
from ..models.domain import Evaluation, QuestionSpec

logger = get_logger("evaluator")

# Letras e digitos de largura total (Ａ-Ｚ, ａ-ｚ, ０-９) -> ASCII
_FULLWIDTH = {
    code: code - 0xFEE0
    for start, end in ((0xFF10, 0xFF19), (0xFF21, 0xFF3A), (0xFF41, 0xFF5A))
    for code in range(start, end + 1)
}


def normalize_text(value: str) -> str:
    """Normaliza texto para comparacao: largura, espacos e caixa."""
    return value.translate(_FULLWIDTH).strip().lower()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_decimal(value: Any) -> Optional[Decimal]:
    # str(float) e a representacao decimal mais curta: 3.13 -> Decimal("3.13")
    if _is_number(value):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _number_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bool_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value.strip().lower()
    return None


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


# =============================================================================
# REGRAS POR TIPO
# =============================================================================


def _check_true_false(key: TrueFalseKey, answer: Any) -> bool:
    submitted = _bool_text(answer)
    return submitted is not None and submitted == ("true" if key.value else "false")


def _check_single_choice(key: SingleChoiceKey, answer: Any) -> bool:
    return isinstance(answer, str) and answer == key.option_id


def _check_choice_set(key: ChoiceSetKey, answer: Any) -> bool:
    # Independe da ordem, mas duplicatas contam
    return _is_str_list(answer) and sorted(answer) == sorted(key.option_ids)


def _check_numeric(key: NumericKey, answer: Any) -> bool:
    # Comparacao decimal: v - t e v + t contam como corretas
    submitted = _to_decimal(answer)
    if submitted is None:
        return False
    return abs(submitted - _to_decimal(key.value)) <= _to_decimal(key.tolerance)


def _check_short_answer(key: ShortAnswerKey, answer: Any) -> bool:
    if _is_number(answer):
        answer = _number_text(answer)
    if not isinstance(answer, str):
        return False
    return normalize_text(answer) == normalize_text(key.text)


def _check_fill_in_blank(key: FillInBlankKey, answer: Any) -> bool:
    if not _is_str_list(answer) or len(answer) != len(key.blanks):
        return False
    return all(
        normalize_text(given) == normalize_text(expected)
        for given, expected in zip(answer, key.blanks)
    )


def _check_matching(key: MatchingKey, answer: Any) -> bool:
    # Chaves extras na resposta sao ignoradas
    if not isinstance(answer, dict):
        return False
    return all(k in answer and answer[k] == v for k, v in key.pairs.items())


def _check_sorting(key: SortingKey, answer: Any) -> bool:
    return _is_str_list(answer) and answer == key.order


def _check_diagram(key: DiagramKey, answer: Any) -> bool:
    if not isinstance(answer, dict):
        return False
    x, y, label = answer.get("x"), answer.get("y"), answer.get("label")
    if not (_is_number(x) and _is_number(y) and isinstance(label, str)):
        return False
    return x == key.x and y == key.y and label == key.label


_RULES: dict[type, Callable[[Any, Any], bool]] = {
    TrueFalseKey: _check_true_false,
    SingleChoiceKey: _check_single_choice,
    ChoiceSetKey: _check_choice_set,
    NumericKey: _check_numeric,
    ShortAnswerKey: _check_short_answer,
    FillInBlankKey: _check_fill_in_blank,
    MatchingKey: _check_matching,
    SortingKey: _check_sorting,
    DiagramKey: _check_diagram,
}


class AnswerEvaluator:
    """Avalia uma resposta contra o gabarito tipado da questao.

    Funcao pura: nao faz I/O nem guarda estado. Formatos incompativeis com
    o tipo da questao contam como resposta errada, nunca como excecao, para
    que uma resposta ruim nao interrompa a correcao das demais.

    Example:
        >>> evaluator = AnswerEvaluator()
        >>> evaluator.evaluate(question, "B")
        Evaluation(is_correct=True, points_awarded=10)
    """

    rules = _RULES

    def check_answer(self, question: QuestionSpec, answer: Any) -> bool:
        """Retorna True se a resposta estiver correta."""
        key: Optional[AnswerKey] = question.answer_key
        if key is None or question.question_type is None:
            # Sem gabarito: correcao manual (fora do escopo)
            return False
        if key.type != question.type:
            return False

        rule = self.rules.get(type(key))
        if rule is None:
            return False

        try:
            return bool(rule(key, answer))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(
                "Resposta com formato inesperado tratada como incorreta",
                question_id=question.id,
                question_type=question.type,
                error=str(e),
            )
            return False

    def evaluate(self, question: QuestionSpec, answer: Any) -> Evaluation:
        """Avalia a resposta e calcula os pontos obtidos."""
        is_correct = self.check_answer(question, answer)
        return Evaluation(
            is_correct=is_correct,
            points_awarded=question.points if is_correct else 0,
        )
