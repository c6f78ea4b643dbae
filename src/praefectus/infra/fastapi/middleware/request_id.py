"""Request correlation for the console API.

Every HTTP request carries one id: the client's ``X-Request-ID`` when it is
a UUID, a fresh UUID4 otherwise. The id is readable through
:func:`get_request_id`, bound into the structlog context for log lines of
the request, and returned on the response.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING

import structlog
from starlette.datastructures import Headers, MutableHeaders

from praefectus.foundation.application import MiddlewareContribution

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Return the current request ID, or ``""`` outside a request."""
    return request_id_ctx.get()


def resolve_request_id(incoming: str | None) -> str:
    """Keep a UUID-shaped incoming id, mint one for anything else."""
    if incoming:
        try:
            return str(uuid.UUID(incoming))
        except ValueError:
            pass
    return str(uuid.uuid4())


class RequestIdMiddleware:
    """Pure ASGI middleware attaching a correlation id to each HTTP request.

    Malformed client ids are replaced rather than rejected.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope).get(REQUEST_ID_HEADER))

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        token = request_id_ctx.set(request_id)
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
            request_id_ctx.reset(token)


contribution = MiddlewareContribution(middleware_class=RequestIdMiddleware, priority=10)
