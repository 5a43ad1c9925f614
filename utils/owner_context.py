"""Propagate the owning account (invoice numbering scope) through the call stack."""

from contextvars import ContextVar
from uuid import UUID
from contextlib import contextmanager

_current_owner_id: ContextVar[UUID | None] = ContextVar("current_owner_id", default=None)


def get_current_owner_id() -> UUID:
    """
    Get the owner of the current request.

    Raises RuntimeError if no owner context is set. Invoices, templates and
    counters are always owner-scoped, so reaching this without a session is
    a bug in the caller (the auth middleware should have rejected it).
    """
    owner_id = _current_owner_id.get()
    if owner_id is None:
        raise RuntimeError(
            "No owner context set. Invoice storage requires an "
            "authenticated session."
        )
    return owner_id


def set_current_owner_id(owner_id: UUID) -> None:
    """Set the owner for the current context. Called by the auth middleware."""
    _current_owner_id.set(owner_id)


def clear_current_owner_id() -> None:
    """Clear owner context. Must run in a finally block after each request."""
    _current_owner_id.set(None)


@contextmanager
def owner_context(owner_id: UUID):
    """
    Temporarily act as an owner.

    Example:
        with owner_context(user_id):
            invoice_service.save(state)
    """
    previous = _current_owner_id.get()
    set_current_owner_id(owner_id)
    try:
        yield
    finally:
        if previous is None:
            clear_current_owner_id()
        else:
            set_current_owner_id(previous)
