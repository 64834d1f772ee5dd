"""Response Scoring Engine - Agrega a correcao de uma tentativa."""

from typing import Iterable, Optional

from core.logger import get_logger

from ..models.domain import AnsweredQuestion, GradeReport, QuestionResult, QuizSpec
from .evaluator import AnswerEvaluator

logger = get_logger("scoring")


class ResponseScoringEngine:
    """Motor de pontuacao de tentativas.

    Avalia cada resposta contra o gabarito da questao e agrega:

        - score: soma dos pontos das respostas corretas
        - total_points: soma dos pontos das questoes respondidas
          (questoes nao respondidas nao entram no denominador)
        - percentage: score / total_points * 100 (0 se total_points == 0)
        - is_passed: percentage >= passing_score, ou None sem nota de corte

    Respostas para questoes que nao pertencem ao quiz sao ignoradas.
    Respostas repetidas para a mesma questao sao corrigidas uma vez cada.

    Example:
        >>> engine = ResponseScoringEngine()
        >>> report = engine.grade(quiz, answers)
        >>> print(report.score, report.total_points, report.is_passed)
    """

    def __init__(self, evaluator: Optional[AnswerEvaluator] = None):
        self.evaluator = evaluator or AnswerEvaluator()

    @staticmethod
    def calculate_percentage(score: int, total_points: int) -> float:
        """Percentual sem arredondamento (arredondar apenas na exibicao).

        Multiplica antes de dividir: 57/100 resulta em 57.0, nao 56.99...
        """
        if total_points <= 0:
            return 0.0
        return score * 100 / total_points

    @staticmethod
    def is_passed(percentage: float, passing_score: Optional[float]) -> Optional[bool]:
        """Compara o percentual exato com a nota de corte.

        Returns:
            True/False, ou None quando o quiz nao define nota de corte
        """
        if passing_score is None:
            return None
        return percentage >= passing_score

    def grade(self, quiz: QuizSpec, answers: Iterable[AnsweredQuestion]) -> GradeReport:
        """Corrige todas as respostas de uma tentativa.

        Args:
            quiz: Quiz carregado (questoes com gabarito tipado)
            answers: Respostas na ordem em que foram enviadas

        Returns:
            GradeReport com resultados na ordem das respostas
        """
        questions = quiz.question_map()
        report = GradeReport(total_questions=len(quiz.questions))
        ignored = 0

        for answered in answers:
            question = questions.get(answered.question_id)
            if question is None:
                ignored += 1
                continue

            evaluation = self.evaluator.evaluate(question, answered.answer)
            report.results.append(
                QuestionResult(
                    question_id=question.id,
                    answer=answered.answer,
                    is_correct=evaluation.is_correct,
                    points_awarded=evaluation.points_awarded,
                    points_possible=question.points,
                    time_spent=answered.time_spent,
                )
            )
            report.score += evaluation.points_awarded
            report.total_points += question.points
            report.answered_count += 1
            if evaluation.is_correct:
                report.correct_count += 1

        if ignored:
            logger.info("Respostas ignoradas (questao fora do quiz)", quiz_id=quiz.id, ignored=ignored)

        report.percentage = self.calculate_percentage(report.score, report.total_points)
        report.is_passed = self.is_passed(report.percentage, quiz.passing_score)
        return report
