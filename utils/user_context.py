"""Carry the acting admin's identity through the call stack with contextvars.

Checkout reads run without a user. Catalog edits (duration rows, add-ons)
must run inside a user context so the audit trail can attribute them.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from uuid import UUID

_current_user_id: ContextVar[UUID | None] = ContextVar("current_user_id", default=None)


def get_current_user_id() -> UUID:
    """
    Get the acting user ID.

    Raises RuntimeError if no user context is set. Catalog writes outside a
    user context are a bug in the caller.
    """
    user_id = _current_user_id.get()
    if user_id is None:
        raise RuntimeError(
            "No user context set. Catalog edits must run inside user_context()."
        )
    return user_id


def peek_current_user_id() -> UUID | None:
    """Acting user ID, or None for anonymous checkout reads."""
    return _current_user_id.get()


def set_current_user_id(user_id: UUID) -> None:
    """Set the acting user ID."""
    _current_user_id.set(user_id)


def clear_current_user_id() -> None:
    """Clear the acting user ID."""
    _current_user_id.set(None)


@contextmanager
def user_context(user_id: UUID):
    """
    Temporarily act as user_id.

    Example:
        with user_context(admin_id):
            duration_service.create(package_id, data)
    """
    previous = _current_user_id.get()
    set_current_user_id(user_id)
    try:
        yield
    finally:
        if previous is None:
            clear_current_user_id()
        else:
            set_current_user_id(previous)
