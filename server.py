"""
ExamForge Grading Server

FastAPI service with:
- Quiz response submission with atomic grading
- Attempt history and per-question results
- Password verification for protected quizzes
- Per-quiz analytics with TTL cache
- Rate limiting, CORS, session tokens, structured logging
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

import app_state
from core.config import get_config
from core.exceptions import ExamForgeError, InternalError, ThrottledError, ValidationError
from core.logger import clear_request_id, configure_logging, get_logger, set_request_id
from grading.router import router as grading_router

config = get_config()
configure_logging(config.log_level, config.log_format)
logger = get_logger("server")


# =============================================================================
# FASTAPI APP
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    await app_state.init_database()
    logger.info("ExamForge iniciado", environment=config.environment)
    yield
    await app_state.reset_state()
    logger.info("ExamForge encerrado")


app = FastAPI(
    title="ExamForge",
    description="Quiz response grading and submission service",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiter
app.state.limiter = app_state.limiter


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Propaga X-Request-ID para os logs e para a resposta."""
    request_id = set_request_id(request.headers.get("x-request-id"))
    try:
        response = await call_next(request)
    finally:
        clear_request_id()
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# ERROR HANDLERS
# =============================================================================


def _error_response(error: ExamForgeError) -> JSONResponse:
    headers = {}
    if isinstance(error, ThrottledError) and error.retry_after is not None:
        headers["Retry-After"] = str(error.retry_after)
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response(),
        headers=headers,
    )


@app.exception_handler(ExamForgeError)
async def examforge_error_handler(request: Request, exc: ExamForgeError):
    if exc.status_code >= 500:
        logger.error("Erro interno", code=exc.code, path=request.url.path, error=exc.message)
    else:
        logger.info("Requisicao rejeitada", code=exc.code, path=request.url.path)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return _error_response(ValidationError(details={"errors": errors}))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Limite global atingido", path=request.url.path, limit=str(exc.detail))
    return _error_response(ThrottledError(details={"limit": str(exc.detail)}, retry_after=60))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Erro nao tratado", path=request.url.path, error=str(exc), exc_info=exc)
    return _error_response(InternalError())


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/")
async def root():
    """Health check."""
    return {
        "status": "ok",
        "message": "ExamForge - quiz response grading",
        "environment": config.environment,
    }


@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "environment": config.environment,
        "cache": app_state.get_cache().get_stats(),
        "config": config.to_dict(),
    }


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(grading_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
