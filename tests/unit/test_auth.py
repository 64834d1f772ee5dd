# =============================================================================
# TESTES - Auth Module
# =============================================================================
# Tokens de sessao: emissao, validacao, expiracao e revogacao
# =============================================================================

import pytest

from core.auth import TOKEN_PREFIX, SessionManager, extract_token


class TestExtractToken:
    """Leitura do header Authorization."""

    def test_bearer(self):
        assert extract_token("Bearer exf_abc") == "exf_abc"

    def test_api_key(self):
        assert extract_token("ApiKey exf_abc") == "exf_abc"

    def test_bare_token_with_prefix(self):
        assert extract_token("exf_abc") == "exf_abc"

    @pytest.mark.parametrize("header", [None, "", "abc", "Basic dXNlcjpwYXNz", "Bearer a b"])
    def test_rejected(self, header):
        assert extract_token(header) is None


class TestSessionManager:
    """Ciclo de vida das sessoes."""

    def test_create_and_authenticate(self):
        manager = SessionManager()
        token, session = manager.create_session("user-1")

        assert token.startswith(TOKEN_PREFIX)
        assert session.token_hash != token

        result = manager.authenticate(token)
        assert result.authenticated is True
        assert result.user_id == "user-1"

    def test_missing_token(self):
        result = SessionManager().authenticate(None)
        assert result.authenticated is False
        assert result.error == "Missing token"

    def test_invalid_format(self):
        result = SessionManager().authenticate("no-prefix")
        assert result.error == "Invalid token format"

    def test_unknown_token(self):
        result = SessionManager().authenticate(f"{TOKEN_PREFIX}desconhecido")
        assert result.error == "Invalid token"

    def test_expired(self):
        manager = SessionManager()
        token, _ = manager.create_session("user-1", expires_in_hours=-1)

        result = manager.authenticate(token)
        assert result.authenticated is False
        assert result.error == "Session expired"

    def test_expired_session_removed_after_authenticate(self):
        manager = SessionManager()
        token, _ = manager.create_session("user-1", expires_in_hours=-1)

        assert manager.authenticate(token).error == "Session expired"
        assert manager.list_sessions() == []
        assert manager.authenticate(token).error == "Invalid token"

    def test_create_session_sweeps_expired(self):
        manager = SessionManager()
        manager.create_session("user-1", expires_in_hours=-1)
        manager.create_session("user-2", expires_in_hours=-1)

        _, fresh = manager.create_session("user-3")

        assert manager.list_sessions() == [fresh]

    def test_revoke(self):
        manager = SessionManager()
        token, session = manager.create_session("user-1")

        assert manager.revoke(session.token_id) is True
        assert manager.authenticate(token).error == "Session disabled"
        assert manager.revoke("inexistente") is False

    def test_list_sessions(self):
        manager = SessionManager()
        manager.create_session("user-1")
        manager.create_session("user-1")
        manager.create_session("user-2")

        assert len(manager.list_sessions()) == 3
        assert len(manager.list_sessions("user-1")) == 2

    def test_to_dict_hides_hash(self):
        _, session = SessionManager().create_session("user-1")
        data = session.to_dict()

        assert "token_hash" not in data
        assert data["user_id"] == "user-1"
