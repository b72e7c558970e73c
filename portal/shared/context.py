"""Request context management using contextvars.

Holds request-scoped identity data set by the session authenticator: the
verified identity-provider subject id and, once resolved, the directory
record id. The logging filter reads it so every log line carries the
identity without threading the request object through every call.

Usage:
    set_current_subject("user_2abc")
    context = get_identity_context()
"""

from contextvars import ContextVar
from dataclasses import dataclass

_current_subject_id: ContextVar[str | None] = ContextVar(
    "current_subject_id", default=None
)
_current_record_id: ContextVar[str | None] = ContextVar(
    "current_record_id", default=None
)


@dataclass(frozen=True)
class IdentityContext:
    """Immutable snapshot of the current request identity."""

    subject_id: str | None
    record_id: str | None = None


def set_current_subject(subject_id: str) -> None:
    """Set the verified subject id for this request.

    Raises:
        ValueError: If subject_id is empty.
    """
    if not subject_id:
        raise ValueError("subject_id is required")
    _current_subject_id.set(subject_id)
    _current_record_id.set(None)


def set_current_record(record_id: str) -> None:
    """Record which directory record the verified subject resolved to."""
    _current_record_id.set(record_id)


def get_identity_context() -> IdentityContext:
    """Return a snapshot of the current identity context."""
    return IdentityContext(
        subject_id=_current_subject_id.get(),
        record_id=_current_record_id.get(),
    )
