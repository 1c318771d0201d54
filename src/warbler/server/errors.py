"""Turn exceptions into responses.

``HTTPError`` subclasses carry their own status and answer as plain text
unless an ``@app.error`` handler claims them. Anything else is logged with
its traceback and answers 500.
"""

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from warbler._internal.invoke import invoke
from warbler.errors import HTTPError
from warbler.http.request import Request
from warbler.http.response import Response
from warbler.server.negotiation import AnyResponse, negotiate

logger = logging.getLogger("warbler.server")

type ErrorHandlers = dict[int | type, Callable[..., Any]]


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    status: int,
) -> AnyResponse:
    """Call *handler* with as many of ``(request, exc)`` as it accepts.

    A handler that answers with the default 200 gets *status* instead.
    """
    arity = len(inspect.signature(handler).parameters)
    result = await invoke(handler, *(request, exc)[: min(arity, 2)])
    response = negotiate(result)
    if response.status == 200:
        response = response.with_status(status)
    return response


def _lookup_handler(
    exc: Exception,
    handlers: ErrorHandlers,
    upto: type[Exception] = Exception,
) -> Callable[..., Any] | None:
    """Handler registered for ``type(exc)`` or the nearest base up to *upto*.

    Stopping at *upto* keeps an ``Exception`` catch-all from shadowing
    status-code handlers for HTTP errors.
    """
    for klass in type(exc).__mro__:
        if klass in handlers:
            return handlers[klass]
        if klass is upto:
            break
    return None


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> AnyResponse:
    """Answer an ``HTTPError``: type handler, then status handler, then plain text."""
    logger.debug("%d %s %s - %s", exc.status, request.method, request.path, exc.detail)

    handler = _lookup_handler(exc, error_handlers, HTTPError) or error_handlers.get(exc.status)
    if handler is not None:
        return await call_error_handler(handler, request, exc, exc.status)

    body = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        body = f"{exc.status}: {exc.detail}"
    return Response(body=body, status=exc.status, headers=exc.headers)


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> AnyResponse:
    """Log *exc* and answer 500, with the traceback as body in debug mode."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = _lookup_handler(exc, error_handlers) or error_handlers.get(500)
    if handler is not None:
        return await call_error_handler(handler, request, exc, 500)

    if debug:
        return Response(body="".join(traceback.format_exception(exc)), status=500)
    return Response(body="Internal Server Error", status=500)
