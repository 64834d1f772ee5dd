"""Logger estruturado do ExamForge.

Fornece:
- get_logger(name): logger que aceita contexto via kwargs
  (ex: logger.info("Tentativa registrada", quiz_id=quiz_id))
- set_request_id / get_request_id: correlacao por request via ContextVar
- configure_logging: saida JSON (uma linha por registro) ou texto
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

ROOT_LOGGER = "examforge"

# Atributos padrao do LogRecord (nao entram como contexto)
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def set_request_id(request_id: Optional[str] = None) -> str:
    """Define o request_id atual (gera um novo se nao informado)."""
    rid = request_id or uuid.uuid4().hex[:16]
    _request_id.set(rid)
    return rid


def get_request_id() -> Optional[str]:
    return _request_id.get()


def clear_request_id() -> None:
    _request_id.set(None)


class JSONFormatter(logging.Formatter):
    """Formata registros como JSON compacto com contexto."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "ts": round(time.time(), 3),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        rid = _request_id.get()
        if rid:
            payload["request_id"] = rid
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Formato legivel para desenvolvimento local."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s [%(name)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _RESERVED and not k.startswith("_")
        }
        rid = _request_id.get()
        if rid:
            extras["request_id"] = rid
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


class StructuredLogger(logging.LoggerAdapter):
    """Adapter que converte kwargs em campos do registro."""

    def process(self, msg, kwargs):
        std = {k: kwargs.pop(k) for k in ("exc_info", "stack_info", "stacklevel") if k in kwargs}
        extra = dict(self.extra or {})
        extra.update(kwargs.pop("extra", {}) or {})
        # Tudo que sobrou vira contexto estruturado
        extra.update(kwargs)
        std["extra"] = extra
        return msg, std


def get_logger(name: str) -> StructuredLogger:
    """Retorna logger filho de "examforge" com suporte a kwargs."""
    return StructuredLogger(logging.getLogger(f"{ROOT_LOGGER}.{name}"), {})


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """Configura o logger raiz do projeto.

    Args:
        level: Nivel (DEBUG, INFO, WARNING, ERROR)
        fmt: "json" ou "text"
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False
    return root
