"""HTTP routes for the current session."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from auth.config import AuthConfig
from auth.session import SessionManager
from api.base import success_response, error_response, ErrorCodes


def create_auth_router(session_manager: SessionManager, config: AuthConfig) -> APIRouter:
    """Create auth router with injected session manager."""
    router = APIRouter(tags=["auth"])

    @router.post("/logout")
    async def logout(request: Request, response: Response):
        """Revoke the session and clear its cookie."""
        session_token = request.cookies.get(config.session_cookie_name)
        if session_token:
            session_manager.revoke_session(session_token)

        response.delete_cookie(key=config.session_cookie_name)
        return success_response({"message": "Logged out successfully"})

    @router.get("/me")
    async def get_current_owner(request: Request):
        """Owner of the current session. Requires authentication."""
        if not hasattr(request.state, "owner_id"):
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Authentication required",
                ).model_dump(mode="json"),
            )

        session = request.state.session
        return success_response({
            "owner_id": str(request.state.owner_id),
            "expires_at": session.expires_at.isoformat(),
        })

    return router
