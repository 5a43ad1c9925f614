"""Tests for the /auth routes."""

from datetime import timedelta
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.security_middleware import AuthMiddleware
from auth.session import SessionManager
from auth.types import Session
from utils.timezone import now_utc


@pytest.fixture
def mock_session_manager():
    return Mock(spec=SessionManager)


@pytest.fixture
def client(mock_session_manager):
    app = FastAPI()
    app.add_middleware(AuthMiddleware, session_manager=mock_session_manager)
    app.include_router(create_auth_router(mock_session_manager, AuthConfig()), prefix="/auth")
    return TestClient(app)


class TestLogout:

    def test_revokes_and_clears_cookie(self, client, mock_session_manager):
        """Logout revokes the session and expires the cookie."""
        response = client.post("/auth/logout", cookies={"session_token": "tok"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        mock_session_manager.revoke_session.assert_called_once_with("tok")
        assert "session_token" in response.headers["set-cookie"]

    def test_without_cookie_still_succeeds(self, client, mock_session_manager):
        response = client.post("/auth/logout")

        assert response.status_code == 200
        mock_session_manager.revoke_session.assert_not_called()


class TestMe:

    def test_returns_owner(self, client, mock_session_manager, test_owner_id):
        now = now_utc()
        mock_session_manager.validate_session.return_value = Session(
            token="tok",
            user_id=test_owner_id,
            created_at=now,
            expires_at=now + timedelta(hours=2),
            last_activity_at=now,
        )

        response = client.get("/auth/me", cookies={"session_token": "tok"})

        assert response.status_code == 200
        assert response.json()["data"]["owner_id"] == str(test_owner_id)

    def test_requires_session(self, client):
        assert client.get("/auth/me").status_code == 401
