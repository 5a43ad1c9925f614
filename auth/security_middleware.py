"""Session middleware: validates the session cookie and sets the owner context."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from auth.session import SessionManager
from auth.exceptions import SessionExpiredError
from api.base import error_response, ErrorCodes
from utils.owner_context import set_current_owner_id, clear_current_owner_id


class AuthMiddleware(BaseHTTPMiddleware):
    """Resolve the owner of each request.

    For protected routes:
    1. Reads the session token from the session cookie
    2. Validates it via SessionManager
    3. Sets the owner in request.state and the owner context (for RLS)
    4. Clears the context after the request completes

    Public paths bypass authentication entirely.
    """

    PUBLIC_PATHS = [
        "/auth/logout",
        "/health",
        "/docs",
        "/openapi.json",
        "/assets/",
    ]

    def __init__(self, app, session_manager: SessionManager, cookie_name: str = "session_token"):
        super().__init__(app)
        self._session_manager = session_manager
        self._cookie_name = cookie_name

    def _is_public_path(self, path: str) -> bool:
        return any(path == public or path.startswith(public) for public in self.PUBLIC_PATHS)

    async def dispatch(self, request: Request, call_next):
        if self._is_public_path(request.url.path):
            return await call_next(request)

        session_token = request.cookies.get(self._cookie_name)
        if not session_token:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Authentication required",
                ).model_dump(mode="json"),
            )

        try:
            session = self._session_manager.validate_session(session_token)
        except SessionExpiredError:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.SESSION_EXPIRED,
                    "Session has expired",
                ).model_dump(mode="json"),
            )

        set_current_owner_id(session.user_id)
        request.state.owner_id = session.user_id
        request.state.session = session

        try:
            return await call_next(request)
        finally:
            clear_current_owner_id()
