"""The warbler App: a route table plus the ASGI callable that serves it.

An App has two phases. During setup, decorators add routes, error
handlers, middleware and lifecycle hooks. The first request, lifespan
startup or ``app.run()`` compiles all of that into a ``Router`` and a
middleware tuple, and from then on the App only serves.
"""

import threading
from collections.abc import Callable, Iterable
from typing import Any

from warbler._internal.invoke import invoke
from warbler._internal.types import ErrorHandler, Handler, Receive, Scope, Send
from warbler.config import AppConfig
from warbler.middleware.logger import RequestLogger
from warbler.middleware.protocol import Middleware
from warbler.routing.group import Group
from warbler.routing.route import Route
from warbler.routing.router import Router, parse_path
from warbler.server.handler import handle_request

ALL_METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE", "CONNECT", "OPTIONS", "TRACE", "PATCH")

type Hook = Callable[[], Any]


class App:
    """A warbler application.

    ::

        app = App(AppConfig(port=3000))

        @app.get("/users/:userId/orders/:orderId")
        def order(userId: str, orderId: str) -> str:
            return f"Get user {userId} orders {orderId}"

        app.run()

    Registration after the app has compiled raises ``RuntimeError``.
    Compilation happens once even when several threads hit the first
    request together (lock plus double-check in ``_ensure_frozen``).
    """

    __slots__ = (
        "_compiled_middleware",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_router",
        "_routes",
        "_shutdown",
        "_startup",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup: list[Hook] = []
        self._shutdown: list[Hook] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._router: Router | None = None
        self._compiled_middleware: tuple[Middleware, ...] = ()

    # -- Routes --

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register the decorated function for *path* and *methods*.

        *path* may hold ``:name`` parameters, an optional last ``:name?``
        parameter and a trailing ``*`` wildcard. The pattern is checked
        here, so a bad one fails at import time with ``ConfigurationError``.
        """
        parse_path(path)
        wanted = frozenset(m.upper() for m in methods)

        def decorator(func: Handler) -> Handler:
            self._require_setup()
            self._routes.append(Route(path=path, handler=func, methods=wanted, name=name))
            return func

        return decorator

    def get(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a GET route; it answers HEAD as well."""
        return self.route(path, methods=("GET",), name=name)

    def post(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("POST",), name=name)

    def put(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("PUT",), name=name)

    def patch(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("PATCH",), name=name)

    def delete(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("DELETE",), name=name)

    def head(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("HEAD",), name=name)

    def options(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, methods=("OPTIONS",), name=name)

    def all(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register *path* for every standard HTTP method."""
        return self.route(path, methods=ALL_METHODS, name=name)

    def group(self, prefix: str) -> Group:
        """Routes registered on the returned ``Group`` live under *prefix*."""
        return Group(self, prefix)

    @property
    def routes(self) -> list[Route]:
        """Registered routes in match order. Reading this compiles the app."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    # -- Errors, middleware, hooks --

    def error(self, key: int | type[Exception]) -> Callable[[ErrorHandler], ErrorHandler]:
        """Handle a status code (``@app.error(404)``) or an exception type.

        The handler may take no arguments, ``(request)`` or
        ``(request, exc)``, and returns anything a route handler could.
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._require_setup()
            self._error_handlers[key] = func
            return func

        return decorator

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*; the first one added runs outermost."""
        self._require_setup()
        self._middleware.append(middleware)

    def use(self, middleware: Middleware) -> Middleware:
        """``add_middleware`` that doubles as a decorator::

            @app.use
            async def stamp(request, next):
                return (await next(request)).with_header("X-Stamp", "1")
        """
        self.add_middleware(middleware)
        return middleware

    def on_startup(self, func: Hook) -> Hook:
        """Run *func* (sync or async) at lifespan startup.

        With pre-fork every worker process runs its own startup hooks.
        """
        self._require_setup()
        self._startup.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        self._require_setup()
        self._shutdown.append(func)
        return func

    # -- Serving --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Serve with uvicorn until interrupted.

        *host* and *port* override the config. With
        ``AppConfig(prefork=True)`` pass *app_path* (``"module:attribute"``)
        so each worker process can import this app.
        """
        from warbler.server.runner import run_server

        self._ensure_frozen()
        cfg = self.config
        run_server(
            self,
            host or cfg.host,
            port or cfg.port,
            prefork=cfg.prefork,
            workers=cfg.workers,
            app_path=app_path,
            idle_timeout=cfg.idle_timeout,
            log_level=cfg.log_level,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point for ``http`` and ``lifespan`` scopes."""
        self._ensure_frozen()
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        assert self._router is not None
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._compiled_middleware,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
            body_limit=self.config.body_limit,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        await self._run_hooks(self._startup)
                    except Exception as exc:
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await self._run_hooks(self._shutdown)
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    async def _run_hooks(self, hooks: list[Hook]) -> None:
        for hook in hooks:
            await invoke(hook)

    # -- Compilation --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        """Build the router and the middleware chain. Caller holds the lock."""
        router = Router(
            case_sensitive=self.config.case_sensitive,
            strict_routing=self.config.strict_routing,
        )
        for route in self._routes:
            router.add(route)
        router.compile()

        chain: list[Middleware] = list(self._middleware)
        if self.config.access_log:
            chain.insert(0, RequestLogger())

        self._router = router
        self._compiled_middleware = tuple(chain)
        self._frozen = True

    def _require_setup(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests; "
                "register routes, middleware and hooks before app.run() or the first request."
            )
            raise RuntimeError(msg)
