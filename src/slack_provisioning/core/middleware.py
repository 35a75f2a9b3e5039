"""Middleware chain assembly.

Middleware are ``async (request, call_next)`` callables. No framework
dependencies, so the chain can wrap any async request handler.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

Handler = Callable[[Any], Awaitable[Any]]
Middleware = Callable[[Any, Handler], Awaitable[Any]]


def build_middleware_chain(
    handler: Handler,
    middleware_stack: Sequence[Middleware],
) -> Handler:
    """Wrap ``handler`` so that ``middleware_stack[0]`` runs outermost.

    Returns the handler itself when the stack is empty.
    """
    if not middleware_stack:
        return handler

    chain = handler
    for mw in reversed(middleware_stack):
        chain = _wrap_with_middleware(chain, mw)
    return chain


def _wrap_with_middleware(next_handler: Handler, middleware: Middleware) -> Handler:
    async def wrapped(request: Any) -> Any:
        async def call_next(req: Any) -> Any:
            return await next_handler(req)

        return await middleware(request, call_next)

    wrapped.__name__ = (
        f"{getattr(middleware, '__name__', 'middleware')}_wrapping_"
        f"{getattr(next_handler, '__name__', 'handler')}"
    )
    wrapped.__qualname__ = wrapped.__name__

    return wrapped
