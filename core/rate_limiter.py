"""Rate limiting do ExamForge.

Dois niveis:
- Limite global por cliente via slowapi (decorator @limiter.limit nos endpoints)
- SlidingWindowRateLimiter em memoria para limites de dominio
  (envios anonimos por quiz, tentativas de senha)
"""

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request


@dataclass
class RateLimitConfig:
    """Configuracao de uma janela deslizante."""

    max_requests: int = 10
    window_seconds: float = 3600


@dataclass
class RateLimitResult:
    """Resultado de uma verificacao de limite."""

    allowed: bool
    remaining: int
    reset_at: float
    retry_after: Optional[int] = None


class SlidingWindowRateLimiter:
    """Rate limiter de janela deslizante por chave.

    Example:
        >>> limiter = SlidingWindowRateLimiter(RateLimitConfig(max_requests=2, window_seconds=60))
        >>> limiter.check("quiz-submission:abc:10.0.0.1").allowed
        True
    """

    def __init__(self, config: Optional[RateLimitConfig] = None):
        self.config = config or RateLimitConfig()
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, key: str, now: float) -> deque[float]:
        # Chaves sem hits na janela saem do mapa
        window_start = now - self.config.window_seconds
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        while hits and hits[0] <= window_start:
            hits.popleft()
        if not hits:
            del self._hits[key]
        return hits

    def check(self, key: str, record: bool = True) -> RateLimitResult:
        """Verifica e registra uma requisicao para a chave.

        Args:
            key: Chave do limite (ex.: quiz + cliente)
            record: False apenas consulta; o hit e registrado depois com record()
        """
        now = time.time()
        with self._lock:
            hits = self._prune(key, now)

            if len(hits) >= self.config.max_requests:
                reset_at = hits[0] + self.config.window_seconds
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=reset_at,
                    retry_after=max(1, int(reset_at - now + 0.999)),
                )

            if not record:
                return RateLimitResult(
                    allowed=True,
                    remaining=self.config.max_requests - len(hits),
                    reset_at=now + self.config.window_seconds,
                )

            hits.append(now)
            self._hits[key] = hits
            return RateLimitResult(
                allowed=True,
                remaining=self.config.max_requests - len(hits),
                reset_at=now + self.config.window_seconds,
            )

    def record(self, key: str) -> None:
        """Registra um hit sem verificar o limite."""
        now = time.time()
        with self._lock:
            hits = self._prune(key, now)
            hits.append(now)
            self._hits[key] = hits

    @property
    def tracked_keys(self) -> int:
        """Quantidade de chaves com hits em memoria."""
        with self._lock:
            return len(self._hits)

    def get_usage_stats(self, key: str) -> dict:
        """Retorna uso atual da chave dentro da janela."""
        with self._lock:
            hits = self._prune(key, time.time())
            return {
                "key": key,
                "requests_in_window": len(hits),
                "max_requests": self.config.max_requests,
                "window_seconds": self.config.window_seconds,
            }

    def reset(self, key: Optional[str] = None) -> None:
        """Limpa contadores (uma chave ou todas)."""
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def get_client_address(request: Request) -> str:
    """Identifica o cliente: X-Forwarded-For, X-Real-IP ou peer do socket."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return get_remote_address(request) or "unknown"


def build_limiter(default_limit: str, enabled: bool = True) -> Limiter:
    """Cria o limiter global do slowapi."""
    return Limiter(
        key_func=get_client_address,
        default_limits=[default_limit],
        enabled=enabled,
    )
