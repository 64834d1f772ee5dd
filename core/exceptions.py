"""Excecoes do ExamForge.

Cada excecao carrega o tipo de erro (ErrorKind) e o status HTTP
correspondente. O corpo devolvido ao cliente nunca inclui stack trace.
"""

import secrets
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Tipos de erro expostos ao cliente."""

    NOT_FOUND = "not_found"
    AUTHENTICATION_REQUIRED = "authentication_required"
    LIMIT_EXCEEDED = "limit_exceeded"
    THROTTLED = "throttled"
    VALIDATION = "validation"
    ACCESS_DENIED = "access_denied"
    INTERNAL = "internal"


def new_correlation_id() -> str:
    """Gera ID de correlacao no formato qe_<ms>_<aleatorio>."""
    return f"qe_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class ExamForgeError(Exception):
    """Erro base da aplicacao."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    retryable: bool = False
    default_message: str = "Erro interno ao processar a requisicao"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self, correlation_id: Optional[str] = None) -> dict[str, Any]:
        """Corpo JSON estruturado do erro."""
        return {
            "success": False,
            "error": {
                "type": self.kind.value,
                "code": self.code,
                "message": self.message,
                "retryable": self.retryable,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "correlation_id": correlation_id or new_correlation_id(),
                "details": self.details,
            },
        }


class QuizNotFoundError(ExamForgeError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    code = "QUIZ_NOT_FOUND"
    default_message = "Quiz não encontrado ou não publicado"


class ResponseNotFoundError(ExamForgeError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    code = "RESPONSE_NOT_FOUND"
    default_message = "Resposta não encontrada"


class AuthenticationRequiredError(ExamForgeError):
    kind = ErrorKind.AUTHENTICATION_REQUIRED
    status_code = 401
    code = "AUTHENTICATION_REQUIRED"
    retryable = True
    default_message = "Autenticação necessária"


class IncorrectPasswordError(AuthenticationRequiredError):
    code = "INCORRECT_PASSWORD"
    default_message = "Senha incorreta"


class AttemptLimitExceededError(ExamForgeError):
    kind = ErrorKind.LIMIT_EXCEEDED
    status_code = 403
    code = "MAX_ATTEMPTS_REACHED"
    default_message = "Limite de tentativas atingido para este quiz"


class AccessDeniedError(ExamForgeError):
    kind = ErrorKind.ACCESS_DENIED
    status_code = 403
    code = "ACCESS_DENIED"
    default_message = "Acesso negado"


class ThrottledError(ExamForgeError):
    kind = ErrorKind.THROTTLED
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"
    retryable = True
    default_message = "Muitas requisições. Tente novamente mais tarde."

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__(message, details)
        self.retry_after = retry_after
        if retry_after is not None:
            self.details.setdefault("retry_after", retry_after)


class ValidationError(ExamForgeError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    code = "VALIDATION_ERROR"
    retryable = True
    default_message = "Dados da requisição inválidos"


class InvalidAnswerKeyError(ExamForgeError):
    """Gabarito armazenado com formato incompativel com o tipo da questao."""

    code = "INVALID_ANSWER_KEY"
    default_message = "Gabarito armazenado inválido"


class InternalError(ExamForgeError):
    retryable = True
