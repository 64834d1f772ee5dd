# =============================================================================
# CONFIGURACAO CENTRALIZADA - ExamForge
# =============================================================================
# Todas as opcoes vem de variaveis de ambiente, com defaults seguros para dev
# =============================================================================

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

_log = logging.getLogger(__name__)


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        _log.warning("Valor invalido para %s=%r, usando %s", name, raw, default)
        return default
    if value <= 0:
        _log.warning("%s deve ser positivo, usando %s", name, default)
        return default
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class ExamForgeConfig:
    """Configuracao do servico de correcao de quizzes.

    Attributes:
        environment: development, test ou production
        database_url: URL async do SQLAlchemy (ex: sqlite+aiosqlite:///...)
        api_rate_limit: Limite global por cliente (sintaxe slowapi)
        submission_rate_limit: Envios anonimos permitidos por janela
        password_rate_limit: Tentativas de senha permitidas por janela
    """

    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///./examforge.db"
    database_echo: bool = False

    log_level: str = "INFO"
    log_format: str = "json"

    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])

    rate_limit_enabled: bool = True
    api_rate_limit: str = "100/minute"
    submission_rate_limit: int = 10
    submission_rate_window: int = 3600
    password_rate_limit: int = 5
    password_rate_window: int = 900

    history_default_limit: int = 10
    history_max_limit: int = 100

    cache_ttl_seconds: int = 300
    cache_max_size: int = 500

    session_ttl_hours: int = 24

    @classmethod
    def from_env(cls) -> "ExamForgeConfig":
        """Carrega configuracao das variaveis de ambiente."""
        log_format = _env_str("LOG_FORMAT", "json").lower()
        if log_format not in ("json", "text"):
            _log.warning("LOG_FORMAT invalido: %s, usando json", log_format)
            log_format = "json"

        history_default = _env_int("HISTORY_DEFAULT_LIMIT", 10)
        history_max = _env_int("HISTORY_MAX_LIMIT", 100)
        if history_default > history_max:
            history_default = history_max

        return cls(
            environment=_env_str("ENVIRONMENT", "development").lower(),
            database_url=_env_str("DATABASE_URL", "sqlite+aiosqlite:///./examforge.db"),
            database_echo=_env_bool("DATABASE_ECHO", False),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
            cors_origins=_env_list("CORS_ORIGINS", ["http://localhost:3000"]),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            api_rate_limit=_env_str("API_RATE_LIMIT", "100/minute"),
            submission_rate_limit=_env_int("SUBMISSION_RATE_LIMIT", 10),
            submission_rate_window=_env_int("SUBMISSION_RATE_WINDOW", 3600),
            password_rate_limit=_env_int("PASSWORD_RATE_LIMIT", 5),
            password_rate_window=_env_int("PASSWORD_RATE_WINDOW", 900),
            history_default_limit=history_default,
            history_max_limit=history_max,
            cache_ttl_seconds=_env_int("CACHE_TTL_SECONDS", 300),
            cache_max_size=_env_int("CACHE_MAX_SIZE", 500),
            session_ttl_hours=_env_int("SESSION_TTL_HOURS", 24),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def to_dict(self) -> dict:
        """Resumo da configuracao (sem credenciais da URL do banco)."""
        return {
            "environment": self.environment,
            "database": {
                "driver": self.database_url.split("://", 1)[0],
                "echo": self.database_echo,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "rate_limits": {
                "enabled": self.rate_limit_enabled,
                "api": self.api_rate_limit,
                "submission": f"{self.submission_rate_limit}/{self.submission_rate_window}s",
                "password": f"{self.password_rate_limit}/{self.password_rate_window}s",
            },
            "history": {
                "default_limit": self.history_default_limit,
                "max_limit": self.history_max_limit,
            },
            "cache": {"ttl_seconds": self.cache_ttl_seconds, "max_size": self.cache_max_size},
        }


_config: Optional[ExamForgeConfig] = None


def get_config() -> ExamForgeConfig:
    """Retorna a configuracao global (carregada uma unica vez)."""
    global _config
    if _config is None:
        _config = ExamForgeConfig.from_env()
    return _config


def reload_config() -> ExamForgeConfig:
    """Recarrega a configuracao do ambiente (usado em testes)."""
    global _config
    _config = ExamForgeConfig.from_env()
    return _config
