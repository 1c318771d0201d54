"""One HTTP request, from ASGI scope to ASGI send.

The request runs through the middleware chain into router dispatch.
Errors raised anywhere along the way are turned into responses here,
and the result is written back by the sender.
"""

import dataclasses
import inspect
from collections.abc import Callable
from typing import Any

from warbler._internal.invoke import invoke
from warbler._internal.types import Handler, Message, Receive, Scope, Send
from warbler.errors import HTTPError
from warbler.http.forms import UploadFile
from warbler.http.request import Request
from warbler.http.response import FileResponse
from warbler.middleware.protocol import Middleware, Next
from warbler.routing.router import Router
from warbler.server.errors import handle_http_error, handle_internal_error
from warbler.server.negotiation import AnyResponse, negotiate
from warbler.server.sender import send_file_response, send_response

_EMPTY = inspect.Parameter.empty


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Middleware, ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
    body_limit: int,
) -> None:
    """Serve one ``http`` scope; other scope types are ignored."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, body_limit=body_limit)

    async def dispatch(req: Request) -> AnyResponse:
        match = router.match(req.method, req.path)
        return await call_handler(match.route.handler, req.with_path_params(match.path_params))

    try:
        response = await _chain(middleware, dispatch)(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    head = request.method == "HEAD"
    started = False

    async def tracked_send(message: Message) -> None:
        nonlocal started
        started = started or message["type"] == "http.response.start"
        await send(message)

    try:
        await _send(response, tracked_send, head)
    except Exception as exc:
        # Once the start message is out, no other response can follow
        if started:
            raise
        response = await handle_internal_error(exc, request, error_handlers, debug)
        await _send(response, send, head)


async def _send(response: AnyResponse, send: Send, head: bool) -> None:
    if isinstance(response, FileResponse):
        await send_file_response(response, send, head=head)
    else:
        await send_response(response, send, head=head)


def _chain(middleware: tuple[Middleware, ...], endpoint: Next) -> Next:
    """Wrap *endpoint* so the first middleware runs outermost."""
    current = endpoint
    for mw in reversed(middleware):

        async def step(req: Request, _mw: Middleware = mw, _next: Next = current) -> AnyResponse:
            return await _mw(req, _next)

        current = step
    return current


async def call_handler(handler: Handler, request: Request) -> AnyResponse:
    """Resolve *handler*'s arguments from *request*, call it, negotiate the result."""
    kwargs: dict[str, Any] = {}
    for param in inspect.signature(handler, eval_str=True).parameters.values():
        value = await _resolve_argument(param, request)
        if value is not _EMPTY:
            kwargs[param.name] = value
    return negotiate(await invoke(handler, **kwargs))


async def _resolve_argument(param: inspect.Parameter, request: Request) -> Any:
    """Value for one handler parameter, or ``_EMPTY`` to leave it unset.

    In order: the request itself (by name ``request`` or a ``Request``
    annotation), a path parameter of the same name converted to the
    annotation when it can be, an ``UploadFile`` from the multipart field
    of the same name, a dataclass bound from the query string (GET/HEAD)
    or from the body by Content-Type.
    """
    annotation = param.annotation
    if param.name == "request" or annotation is Request:
        return request
    if param.name in request.path_params:
        return _convert(request.path_params[param.name], annotation)
    if annotation is UploadFile:
        return await request.form_file(param.name)
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        if request.method in ("GET", "HEAD"):
            return request.bind_query(annotation)
        return await request.bind(annotation)
    return _EMPTY


def _convert(raw: str, annotation: Any) -> Any:
    """``int``/``float``/... conversion of a path value; the raw string if it fails."""
    if annotation is _EMPTY or not callable(annotation):
        return raw
    try:
        return annotation(raw)
    except (TypeError, ValueError):
        return raw

