"""API test fixtures: authenticated TestClient over service doubles."""

from datetime import timedelta
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from api.actions import create_actions_router
from api.data import create_data_router
from api.documents import create_documents_router
from api.editor import create_editor_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from auth.security_middleware import AuthMiddleware
from auth.session import SessionManager
from auth.types import Session
from core.config import InvoicingConfig
from core.services.invoice_service import InvoiceService
from core.services.numbering_service import InvoiceNumberService
from core.services.template_service import TemplateService
from utils.timezone import now_utc


# =============================================================================
# SERVICES DICT
# =============================================================================


@pytest.fixture
def invoice_service():
    return Mock(spec=InvoiceService)


@pytest.fixture
def template_service():
    return Mock(spec=TemplateService)


@pytest.fixture
def numbering_service():
    return Mock(spec=InvoiceNumberService)


@pytest.fixture
def services(invoice_service, template_service, numbering_service):
    return {
        "invoice": invoice_service,
        "template": template_service,
        "numbering": numbering_service,
        "config": InvoicingConfig(),
    }


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def mock_session_manager(test_owner_id):
    now = now_utc()
    mock = Mock(spec=SessionManager)
    mock.validate_session.return_value = Session(
        token="test-token",
        user_id=test_owner_id,
        created_at=now,
        expires_at=now + timedelta(hours=24),
        last_activity_at=now,
    )
    return mock


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(mock_session_manager, services):
    """FastAPI app with auth middleware, error handlers and every /api router."""
    app = FastAPI()
    app.add_middleware(AuthMiddleware, session_manager=mock_session_manager)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")
    app.include_router(create_documents_router(services), prefix="/api")
    app.include_router(create_editor_router(services), prefix="/api")

    return app


@pytest.fixture
def client(app):
    """Authenticated test client."""
    c = TestClient(app, raise_server_exceptions=False)
    c.cookies.set("session_token", "test-token")
    return c


@pytest.fixture
def unauthed_client(app):
    """Unauthenticated test client (no session cookie)."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def state_json(state):
    """The sample editing state as the browser sends it."""
    return state.model_dump(mode="json")
