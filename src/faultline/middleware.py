"""Middleware that converts downstream exceptions into error responses."""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable

from .exceptions import HTTPError
from .handler import ErrorHandler
from .http import Status
from .requests import Request
from .responses import Response, ResponseWriter

Handler = Callable[[Request], Awaitable[Response]]
MiddlewareCallable = Callable[[Request, Handler], Awaitable[Response]]


def compose(middlewares: Iterable[MiddlewareCallable], endpoint: Handler) -> Handler:
    """Compose middleware into a single handler, outermost first."""

    handler = endpoint
    for middleware in reversed(tuple(middlewares)):
        handler = _Bound(middleware, handler)
    return handler


class _Bound:
    __slots__ = ("_middleware", "_next")

    def __init__(self, middleware: MiddlewareCallable, next_handler: Handler) -> None:
        self._middleware = middleware
        self._next = next_handler

    async def __call__(self, request: Request) -> Response:
        return await self._middleware(request, self._next)


class ErrorMiddleware:
    """Render any exception raised downstream through an :class:`ErrorHandler`.

    ``HTTPError`` is the framework failing a request with a bare status code,
    so it is classified without a cause. Every other exception is a failure
    with an ambient status of 500.
    """

    def __init__(self, handler: ErrorHandler, *, offload: bool = False) -> None:
        self.handler = handler
        self.offload = offload

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        try:
            return await call_next(request)
        except HTTPError as exc:
            return await self.render(None, exc.status, request)
        except Exception as exc:
            return await self.render(exc, int(Status.INTERNAL_SERVER_ERROR), request)

    async def render(self, failure: BaseException | None, status_code: int, request: Request) -> Response:
        writer = ResponseWriter()
        if self.offload:
            await self.handler.handle_async(failure, status_code, request, writer)
        else:
            self.handler.handle(failure, status_code, request, writer)
        return writer.to_response()


__all__ = ["ErrorMiddleware", "Handler", "MiddlewareCallable", "compose"]
