# =============================================================================
# TESTES - Logger estruturado e excecoes
# =============================================================================

import json
import logging

from core.exceptions import (
    AttemptLimitExceededError,
    ErrorKind,
    IncorrectPasswordError,
    QuizNotFoundError,
    ThrottledError,
    ValidationError,
)
from core.logger import (
    JSONFormatter,
    clear_request_id,
    get_logger,
    get_request_id,
    set_request_id,
)


class TestStructuredLogger:
    """kwargs viram campos do registro."""

    def test_process_moves_kwargs_to_extra(self):
        logger = get_logger("test")
        msg, kwargs = logger.process("Tentativa registrada", {"quiz_id": "q1", "exc_info": False})

        assert msg == "Tentativa registrada"
        assert kwargs["extra"] == {"quiz_id": "q1"}
        assert kwargs["exc_info"] is False

    def test_logger_name(self):
        assert get_logger("submission").logger.name == "examforge.submission"

    def test_json_formatter_includes_context(self):
        record = logging.makeLogRecord(
            {"name": "examforge.test", "msg": "ok", "levelname": "INFO", "quiz_id": "q1"}
        )
        set_request_id("req-123")
        try:
            payload = json.loads(JSONFormatter().format(record))
        finally:
            clear_request_id()

        assert payload["msg"] == "ok"
        assert payload["quiz_id"] == "q1"
        assert payload["request_id"] == "req-123"

    def test_request_id_generated(self):
        rid = set_request_id()
        assert get_request_id() == rid
        clear_request_id()
        assert get_request_id() is None


class TestExceptions:
    """Corpo de erro e status HTTP."""

    def test_error_body(self):
        body = QuizNotFoundError(details={"quiz_id": "x"}).to_response(correlation_id="qe_1_a")

        assert body["success"] is False
        error = body["error"]
        assert error["type"] == "not_found"
        assert error["code"] == "QUIZ_NOT_FOUND"
        assert error["correlation_id"] == "qe_1_a"
        assert error["details"] == {"quiz_id": "x"}
        assert "timestamp" in error

    def test_correlation_id_format(self):
        correlation_id = ValidationError().to_response()["error"]["correlation_id"]
        assert correlation_id.startswith("qe_")

    def test_status_mapping(self):
        assert QuizNotFoundError().status_code == 404
        assert IncorrectPasswordError().status_code == 401
        assert IncorrectPasswordError().kind == ErrorKind.AUTHENTICATION_REQUIRED
        assert AttemptLimitExceededError().status_code == 403
        assert ValidationError().status_code == 400

    def test_throttled_retry_after(self):
        error = ThrottledError(retry_after=30)

        assert error.status_code == 429
        assert error.retryable is True
        assert error.details["retry_after"] == 30
