"""Route groups: register several routes under one path prefix.

::

    api = app.group("/api")

    @api.get("/hello")          # -> GET /api/hello
    def hello() -> str: ...

    v1 = api.group("/v1")       # nested: /api/v1/...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from warbler._internal.types import Handler

if TYPE_CHECKING:
    from warbler.app import App


def join_path(prefix: str, path: str) -> str:
    """Join a group prefix and a route path with exactly one slash.

    ``join_path("/api", "/hello") == "/api/hello"``;
    ``join_path("/api", "/") == "/api"``.
    """
    head = "/" + prefix.strip("/") if prefix.strip("/") else ""
    tail = path.strip("/")
    if not tail:
        return head or "/"
    suffix = "/" if path.endswith("/") and len(path) > 1 else ""
    return f"{head}/{tail}{suffix}"


class Group:
    """A prefix bound to an app. Routes are registered on the app itself."""

    __slots__ = ("_app", "prefix")

    def __init__(self, app: App, prefix: str) -> None:
        self._app = app
        self.prefix = join_path(prefix, "/")

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route under this group's prefix."""
        return self._app.route(join_path(self.prefix, path), methods=methods, name=name)

    def get(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
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
        """Register *path* for every standard method."""
        return self._app.all(join_path(self.prefix, path), name=name)

    def group(self, prefix: str) -> Group:
        """Nested group: ``api.group("/v1")`` prefixes with ``/api/v1``."""
        return Group(self._app, join_path(self.prefix, prefix))

    def __repr__(self) -> str:
        return f"Group({self.prefix!r})"
