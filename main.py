"""
Application factory.

Wires clients, services, event handlers and routers into one FastAPI app.
Connection URLs come from Vault unless clients are passed in.
"""

import logging

from fastapi import FastAPI

from api.actions import create_actions_router
from api.base import success_response
from api.data import create_data_router
from api.documents import create_documents_router
from api.editor import create_editor_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.security_middleware import AuthMiddleware
from auth.session import SessionManager
from clients.postgres_client import PostgresClient
from clients.valkey_client import ValkeyClient
from clients.vault_client import get_database_url, get_valkey_url
from core.audit import AuditLogger
from core.config import InvoicingConfig
from core.event_bus import EventBus
from core.handlers.invoice_saved_handler import handle_invoice_saved
from core.services.invoice_service import InvoiceService
from core.services.numbering_service import InvoiceNumberService
from core.services.template_service import TemplateService

logger = logging.getLogger(__name__)


def build_services(
    postgres: PostgresClient,
    valkey: ValkeyClient,
    config: InvoicingConfig,
) -> dict:
    """Services keyed the way the routers look them up."""
    audit = AuditLogger(postgres)
    event_bus = EventBus()
    event_bus.subscribe("InvoiceSaved", handle_invoice_saved(valkey))

    return {
        "invoice": InvoiceService(postgres, audit, event_bus),
        "template": TemplateService(postgres, audit, event_bus),
        "numbering": InvoiceNumberService(postgres, config),
        "config": config,
    }


def create_app(
    postgres: PostgresClient | None = None,
    valkey: ValkeyClient | None = None,
    config: InvoicingConfig | None = None,
    auth_config: AuthConfig | None = None,
) -> FastAPI:
    config = config or InvoicingConfig()
    auth_config = auth_config or AuthConfig()
    postgres = postgres or PostgresClient(get_database_url())
    valkey = valkey or ValkeyClient(get_valkey_url())

    services = build_services(postgres, valkey, config)
    session_manager = SessionManager(valkey, auth_config)

    app = FastAPI(title="Invoicer")
    app.add_middleware(
        AuthMiddleware,
        session_manager=session_manager,
        cookie_name=auth_config.session_cookie_name,
    )
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    @app.get("/health")
    def health():
        """Answers 503 through the Valkey error handler when the store is down."""
        valkey.ping()
        return success_response({"status": "ok"}).model_dump(mode="json")

    app.include_router(create_auth_router(session_manager, auth_config), prefix="/auth")
    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")
    app.include_router(create_documents_router(services), prefix="/api")
    app.include_router(create_editor_router(services), prefix="/api")

    logger.info("Invoicer app created")
    return app
