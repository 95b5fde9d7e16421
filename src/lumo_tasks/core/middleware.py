"""ASGI middleware stamping every HTTP exchange with a correlation id."""

from __future__ import annotations

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .context import REQUEST_ID_HEADER, request_scope


class CorrelationIdMiddleware:
    """Reuse the caller's ``X-Request-ID`` or mint one, and echo it back.

    The id is stored on ``request.state`` for the exception handlers and bound
    to the logging context for the duration of the request.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        self.app = app
        self._header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self._header_name) or uuid.uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if self._header_name not in headers:
                    headers.append(self._header_name, request_id)
            await send(message)

        with request_scope(request_id):
            await self.app(scope, receive, send_with_request_id)


__all__ = ["CorrelationIdMiddleware"]
