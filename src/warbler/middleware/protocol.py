"""The middleware calling convention.

A middleware receives the request and the rest of the chain, and returns
whatever the chain returns, possibly changed::

    async def stamp(request: Request, next: Next) -> AnyResponse:
        response = await next(request)
        return response.with_header("X-Served-By", "warbler")

Plain functions and objects with an async ``__call__`` both qualify.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from warbler.http.request import Request
from warbler.http.response import FileResponse, Response

type AnyResponse = Response | FileResponse

# The rest of the chain, ending in router dispatch
type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Shape every middleware must have.

    ``RequestLogger`` is the class-based example; a function works too::

        async def require_token(request: Request, next: Next) -> AnyResponse:
            if request.header("x-token") != "secret":
                return Response("Forbidden", status=403)
            return await next(request)
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
