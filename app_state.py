"""Estado compartilhado do processo - banco, cache, limitadores e sessoes."""

from typing import Optional

from core.auth import SessionManager
from core.cache import AnalyticsCache
from core.config import get_config
from core.logger import get_logger
from core.rate_limiter import RateLimitConfig, SlidingWindowRateLimiter, build_limiter
from grading.engine.submission import SubmissionService
from grading.storage.database import Database

logger = get_logger("app_state")

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

_config = get_config()

# Limite global por cliente (slowapi); o decorator precisa existir no import
limiter = build_limiter(_config.api_rate_limit, enabled=_config.rate_limit_enabled)

database: Optional[Database] = None
cache: Optional[AnalyticsCache] = None
session_manager: Optional[SessionManager] = None
submission_limiter: Optional[SlidingWindowRateLimiter] = None
password_limiter: Optional[SlidingWindowRateLimiter] = None
submission_service: Optional[SubmissionService] = None


def get_api_rate_limit() -> str:
    return get_config().api_rate_limit


def get_database() -> Database:
    global database
    if database is None:
        config = get_config()
        database = Database(config.database_url, echo=config.database_echo)
    return database


async def init_database() -> Database:
    """Cria o engine (se necessario) e as tabelas."""
    db = get_database()
    await db.init_models()
    return db


def get_cache() -> AnalyticsCache:
    global cache
    if cache is None:
        config = get_config()
        cache = AnalyticsCache(max_size=config.cache_max_size, ttl_seconds=config.cache_ttl_seconds)
    return cache


def get_session_manager() -> SessionManager:
    global session_manager
    if session_manager is None:
        session_manager = SessionManager(ttl_hours=get_config().session_ttl_hours)
    return session_manager


def get_submission_limiter() -> SlidingWindowRateLimiter:
    global submission_limiter
    if submission_limiter is None:
        config = get_config()
        submission_limiter = SlidingWindowRateLimiter(
            RateLimitConfig(
                max_requests=config.submission_rate_limit,
                window_seconds=config.submission_rate_window,
            )
        )
    return submission_limiter


def get_password_limiter() -> SlidingWindowRateLimiter:
    global password_limiter
    if password_limiter is None:
        config = get_config()
        password_limiter = SlidingWindowRateLimiter(
            RateLimitConfig(
                max_requests=config.password_rate_limit,
                window_seconds=config.password_rate_window,
            )
        )
    return password_limiter


def get_submission_service() -> SubmissionService:
    global submission_service
    if submission_service is None:
        submission_service = SubmissionService(
            database=get_database(),
            cache=get_cache(),
            submission_limiter=get_submission_limiter(),
        )
    return submission_service


async def reset_state() -> None:
    """Descarta todas as instancias (usado em testes e no shutdown)."""
    global database, cache, session_manager, submission_limiter, password_limiter
    global submission_service

    if database is not None:
        await database.dispose()

    database = None
    cache = None
    session_manager = None
    submission_limiter = None
    password_limiter = None
    submission_service = None
    limiter.reset()
    logger.debug("Estado global reiniciado")
