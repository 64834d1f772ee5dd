# =============================================================================
# TESTES - Response Scoring Engine
# =============================================================================
# Testes unitarios para agregacao de pontuacao e aprovacao
# =============================================================================

import pytest

from grading.engine.scoring_engine import ResponseScoringEngine
from grading.models.answer_keys import ShortAnswerKey, SingleChoiceKey
from grading.models.domain import AnsweredQuestion, QuestionSpec, QuizSpec


def answers(**pairs):
    return [AnsweredQuestion(question_id=qid, answer=value) for qid, value in pairs.items()]


def two_question_quiz(correct_points: int, wrong_points: int, passing_score=70.0) -> QuizSpec:
    return QuizSpec(
        id="quiz-pass",
        title="Nota de corte",
        passing_score=passing_score,
        questions=(
            QuestionSpec(id="a", type="SHORT_ANSWER", points=correct_points, answer_key=ShortAnswerKey(text="ok")),
            QuestionSpec(id="b", type="SHORT_ANSWER", points=wrong_points, answer_key=ShortAnswerKey(text="ok")),
        ),
    )


class TestCalculatePercentage:
    """Percentual de aproveitamento."""

    def test_basic(self):
        assert ResponseScoringEngine.calculate_percentage(5, 10) == 50.0

    @pytest.mark.parametrize("score, expected", [(29, 29.0), (57, 57.0), (58, 58.0)])
    def test_exact_integer_percentages(self, score, expected):
        assert ResponseScoringEngine.calculate_percentage(score, 100) == expected

    def test_zero_total_is_zero(self):
        assert ResponseScoringEngine.calculate_percentage(0, 0) == 0.0

    def test_not_rounded(self):
        assert ResponseScoringEngine.calculate_percentage(1, 3) == pytest.approx(33.3333333)


class TestIsPassed:
    """Comparacao com a nota de corte."""

    def test_no_passing_score(self):
        assert ResponseScoringEngine.is_passed(100.0, None) is None

    def test_boundary(self):
        assert ResponseScoringEngine.is_passed(70.0, 70) is True
        assert ResponseScoringEngine.is_passed(69.999, 70) is False


class TestGrade:
    """Correcao completa de uma tentativa."""

    def test_all_correct(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(basic_quiz_spec, answers(q1="B", q2=True))

        assert report.score == 15
        assert report.total_points == 15
        assert report.percentage == 100.0
        assert report.correct_count == 2
        assert report.answered_count == 2
        assert report.total_questions == 2

    def test_partial(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(basic_quiz_spec, answers(q1="A", q2=True))

        assert report.score == 5
        assert report.total_points == 15
        assert report.percentage == pytest.approx(33.333, abs=0.01)
        assert report.rounded_percentage == 33.33

    def test_results_follow_submission_order(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(basic_quiz_spec, answers(q2=False, q1="B"))

        assert [r.question_id for r in report.results] == ["q2", "q1"]
        assert report.results[0].is_correct is False
        assert report.results[0].points_awarded == 0
        assert report.results[0].points_possible == 5
        assert report.results[1].points_awarded == 10

    def test_unanswered_questions_not_counted(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(basic_quiz_spec, answers(q2=True))

        assert report.score == 5
        assert report.total_points == 5
        assert report.percentage == 100.0
        assert report.total_questions == 2

    def test_unknown_question_ignored(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(
            basic_quiz_spec, answers(q1="B", q2=True, intruder="B")
        )

        assert report.score == 15
        assert report.total_points == 15
        assert len(report.results) == 2

    def test_no_valid_answers(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(basic_quiz_spec, answers(intruder="B"))

        assert report.score == 0
        assert report.total_points == 0
        assert report.percentage == 0.0
        assert report.results == []

    def test_duplicate_answers_graded_each_time(self, basic_quiz_spec):
        duplicated = [
            AnsweredQuestion(question_id="q1", answer="B"),
            AnsweredQuestion(question_id="q1", answer="A"),
        ]
        report = ResponseScoringEngine().grade(basic_quiz_spec, duplicated)

        assert report.score == 10
        assert report.total_points == 20
        assert len(report.results) == 2

    def test_score_never_exceeds_total(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(basic_quiz_spec, answers(q1="B", q2="true"))

        assert sum(r.points_awarded for r in report.results) <= sum(
            r.points_possible for r in report.results
        )
        assert 0 <= report.percentage <= 100

    def test_time_spent_is_kept(self, basic_quiz_spec):
        report = ResponseScoringEngine().grade(
            basic_quiz_spec, [AnsweredQuestion(question_id="q1", answer="B", time_spent=12.5)]
        )
        assert report.results[0].time_spent == 12.5


class TestPassingScore:
    """Aprovacao usa o percentual sem arredondamento."""

    def test_exactly_passing(self):
        quiz = two_question_quiz(correct_points=70, wrong_points=30)
        report = ResponseScoringEngine().grade(quiz, answers(a="ok", b="errado"))

        assert report.percentage == 70.0
        assert report.is_passed is True

    @pytest.mark.parametrize(
        "correct_points, wrong_points, passing_score",
        [(29, 71, 29), (57, 43, 57), (58, 42, 58), (114, 86, 57), (1, 2, 100 / 3)],
    )
    def test_exact_threshold_passes(self, correct_points, wrong_points, passing_score):
        quiz = two_question_quiz(correct_points, wrong_points, passing_score=passing_score)
        report = ResponseScoringEngine().grade(quiz, answers(a="ok", b="errado"))

        assert report.percentage == passing_score
        assert report.is_passed is True

    def test_just_below_passing(self):
        quiz = two_question_quiz(correct_points=69999, wrong_points=30001)
        report = ResponseScoringEngine().grade(quiz, answers(a="ok", b="errado"))

        assert report.percentage == pytest.approx(69.999)
        assert report.rounded_percentage == 70.0
        assert report.is_passed is False

    def test_without_passing_score(self):
        quiz = two_question_quiz(correct_points=1, wrong_points=1, passing_score=None)
        report = ResponseScoringEngine().grade(quiz, answers(a="ok", b="ok"))

        assert report.is_passed is None


class TestCustomEvaluator:
    """O motor aceita um avaliador injetado."""

    def test_uses_given_evaluator(self, basic_quiz_spec):
        from grading.engine.evaluator import AnswerEvaluator

        class AlwaysRight(AnswerEvaluator):
            def check_answer(self, question, answer):
                return True

        report = ResponseScoringEngine(evaluator=AlwaysRight()).grade(
            basic_quiz_spec, answers(q1="Z", q2=False)
        )
        assert report.score == 15

    def test_single_choice_key_is_used(self):
        quiz = QuizSpec(
            id="x",
            title="x",
            questions=(QuestionSpec(id="q", type="MULTIPLE_CHOICE", points=3, answer_key=SingleChoiceKey(option_id="C")),),
        )
        assert ResponseScoringEngine().grade(quiz, answers(q="C")).score == 3
