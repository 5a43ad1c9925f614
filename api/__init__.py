"""HTTP interface: response envelope, error mapping and the /api routers."""

from api.base import (
    APIResponse,
    ErrorCodes,
    success_response,
    error_response,
)
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.data import create_data_router
from api.actions import create_actions_router
from api.documents import create_documents_router
from api.editor import create_editor_router
