# =============================================================================
# TESTES - Grading Schemas
# =============================================================================
# Validacao do corpo de envio e formato de saida
# =============================================================================

import pytest
from pydantic import ValidationError

from grading.models.schemas import (
    QuizResponseItem,
    QuizSummary,
    SubmitQuizResponseRequest,
)


def make_request(**overrides):
    data = {
        "quizId": "quiz-1",
        "responses": [{"questionId": "q1", "answer": "B"}],
        "startedAt": "2025-01-15T12:00:00Z",
        "completedAt": "2025-01-15T12:05:00Z",
    }
    data.update(overrides)
    return SubmitQuizResponseRequest.model_validate(data)


class TestSubmitQuizResponseRequest:
    """Corpo de envio."""

    def test_camel_case_input(self):
        request = make_request()

        assert request.quiz_id == "quiz-1"
        assert request.responses[0].question_id == "q1"

    def test_snake_case_input(self):
        request = SubmitQuizResponseRequest(
            quiz_id="quiz-1",
            responses=[{"question_id": "q1", "answer": True}],
            started_at="2025-01-15T12:00:00Z",
            completed_at="2025-01-15T12:00:00Z",
        )
        assert request.responses[0].answer is True

    @pytest.mark.parametrize(
        "answer",
        [True, 3, 2.5, "texto", ["A", "B"], {"a": "1"}, {"x": 1, "y": 2, "label": "L"}],
    )
    def test_answer_shapes(self, answer):
        request = make_request(responses=[{"questionId": "q1", "answer": answer}])
        assert request.responses[0].answer == answer

    def test_bool_stays_bool(self):
        request = make_request(responses=[{"questionId": "q1", "answer": False}])
        assert request.responses[0].answer is False

    @pytest.mark.parametrize("answer", [None, [1, 2], {"a": 1}])
    def test_rejected_answer_shapes(self, answer):
        with pytest.raises(ValidationError):
            make_request(responses=[{"questionId": "q1", "answer": answer}])

    def test_empty_responses_accepted(self):
        assert make_request(responses=[]).responses == []

    def test_missing_responses(self):
        with pytest.raises(ValidationError):
            make_request(responses=None)

    def test_missing_quiz_id(self):
        with pytest.raises(ValidationError):
            make_request(quizId="")

    def test_completed_before_started(self):
        with pytest.raises(ValidationError):
            make_request(completedAt="2025-01-15T11:00:00Z")

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            make_request(participantEmail="sem-arroba")


class TestOutputAliases:
    """Saida em camelCase."""

    def test_dump_by_alias(self):
        item = QuizResponseItem(
            id="r1",
            quiz_id="quiz-1",
            score=5,
            total_points=15,
            percentage=33.33,
            is_passed=False,
            quiz=QuizSummary(id="quiz-1", title="T", passing_score=70),
        )
        data = item.model_dump(by_alias=True)

        assert data["quizId"] == "quiz-1"
        assert data["totalPoints"] == 15
        assert data["isPassed"] is False
        assert data["quiz"]["passingScore"] == 70
