"""Autenticacao por token de sessao.

O provedor de login fica fora deste servico; aqui apenas emitimos e
validamos tokens opacos associados a um user_id. Tokens sao guardados
como hash SHA-256, nunca em texto puro.
"""

import hashlib
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

TOKEN_PREFIX = "exf_"


@dataclass
class SessionToken:
    """Sessao emitida para um usuario."""

    token_id: str
    token_hash: str
    user_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool = True

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if not self.expires_at:
            return False
        return self.expires_at <= (now or datetime.now(timezone.utc))

    def is_valid(self) -> bool:
        return self.is_active and not self.is_expired()

    def to_dict(self) -> dict:
        """Representacao publica (sem hash)."""
        return {
            "token_id": self.token_id,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "is_active": self.is_active,
        }


@dataclass
class AuthResult:
    authenticated: bool
    user_id: Optional[str] = None
    session: Optional[SessionToken] = None
    error: Optional[str] = None


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def extract_token(header_value: Optional[str]) -> Optional[str]:
    """Extrai o token do header Authorization.

    Aceita "Bearer <token>", "ApiKey <token>" ou o token puro.
    """
    if not header_value:
        return None
    parts = header_value.strip().split()
    if len(parts) == 1:
        return parts[0] if parts[0].startswith(TOKEN_PREFIX) else None
    if len(parts) == 2 and parts[0].lower() in ("bearer", "apikey"):
        return parts[1]
    return None


class SessionManager:
    """Emissao, validacao e revogacao de tokens de sessao."""

    def __init__(self, ttl_hours: int = 24):
        self.ttl_hours = ttl_hours
        self._sessions: dict[str, SessionToken] = {}
        self._lock = threading.Lock()

    def create_session(
        self, user_id: str, expires_in_hours: Optional[int] = None
    ) -> tuple[str, SessionToken]:
        """Cria sessao para o usuario.

        Returns:
            Tuple (token completo, SessionToken). O token completo so e
            retornado aqui.
        """
        token_id = secrets.token_hex(6)
        token = f"{TOKEN_PREFIX}{token_id}_{secrets.token_urlsafe(24)}"
        now = datetime.now(timezone.utc)
        hours = self.ttl_hours if expires_in_hours is None else expires_in_hours

        session = SessionToken(
            token_id=token_id,
            token_hash=_hash_token(token),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(hours=hours) if hours else None,
        )
        with self._lock:
            self._purge_expired(now)
            self._sessions[session.token_hash] = session
        return token, session

    def _purge_expired(self, now: datetime) -> None:
        expired = [h for h, s in self._sessions.items() if s.is_expired(now)]
        for token_hash in expired:
            del self._sessions[token_hash]

    def authenticate(self, token: Optional[str]) -> AuthResult:
        if not token:
            return AuthResult(authenticated=False, error="Missing token")
        if not token.startswith(TOKEN_PREFIX):
            return AuthResult(authenticated=False, error="Invalid token format")

        with self._lock:
            session = self._sessions.get(_hash_token(token))

        if session is None:
            return AuthResult(authenticated=False, error="Invalid token")
        if not session.is_active:
            return AuthResult(authenticated=False, error="Session disabled")
        if session.is_expired():
            with self._lock:
                self._sessions.pop(session.token_hash, None)
            return AuthResult(authenticated=False, error="Session expired")

        return AuthResult(authenticated=True, user_id=session.user_id, session=session)

    def revoke(self, token_id: str) -> bool:
        with self._lock:
            for session in self._sessions.values():
                if session.token_id == token_id:
                    session.is_active = False
                    return True
        return False

    def list_sessions(self, user_id: Optional[str] = None) -> list[SessionToken]:
        with self._lock:
            sessions = list(self._sessions.values())
        if user_id:
            sessions = [s for s in sessions if s.user_id == user_id]
        return sessions
