"""Per-request values exposed to log records: the correlation id and the acting user."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

REQUEST_ID_HEADER = "X-Request-ID"
UNSET = "-"

_request_id: ContextVar[str] = ContextVar("lumo_request_id", default=UNSET)
_actor_id: ContextVar[str] = ContextVar("lumo_actor_id", default=UNSET)


@dataclass(frozen=True, slots=True)
class RequestScope:
    request_id: str
    actor_id: str


def current_scope() -> RequestScope:
    return RequestScope(request_id=_request_id.get(), actor_id=_actor_id.get())


def bind_actor(actor_id: int) -> None:
    """Record the authenticated user for the rest of the current request."""
    _actor_id.set(str(actor_id))


@contextmanager
def request_scope(request_id: str) -> Iterator[RequestScope]:
    """Bind ``request_id`` (and a blank actor) until the block exits."""
    request_token = _request_id.set(request_id)
    actor_token = _actor_id.set(UNSET)
    try:
        yield current_scope()
    finally:
        _actor_id.reset(actor_token)
        _request_id.reset(request_token)


__all__ = [
    "REQUEST_ID_HEADER",
    "UNSET",
    "RequestScope",
    "bind_actor",
    "current_scope",
    "request_scope",
]
