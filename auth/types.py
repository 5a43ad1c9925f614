"""Pydantic models for the session domain."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    An authenticated browser session.

    user_id is the owner under which invoices, templates and invoice numbers
    are scoped.
    """

    token: str = Field(..., description="Session token (opaque string)")
    user_id: UUID
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime
