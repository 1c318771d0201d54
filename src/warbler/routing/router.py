"""Ordered router with ``:param`` path matching.

Routes are registered during setup and frozen when the app compiles.
Matching scans routes in registration order; the first route whose
pattern fits the path and whose methods include the request method wins.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from warbler._internal.types import Handler
from warbler.errors import ConfigurationError, MethodNotAllowed, NotFound
from warbler.routing.route import PathSegment, Route, RouteMatch

WILDCARD = "*"


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"               -> [PathSegment("users")]
        "/users/:userId"       -> [PathSegment("users"), PathSegment(":userId", "param", "userId")]
        "/hello/:name?"        -> [..., PathSegment(":name?", "optional", "name")]
        "/static/*"            -> [..., PathSegment("*", "wildcard", "*")]

    Raises ``ConfigurationError`` for duplicate parameter names, empty
    parameter names, or an optional/wildcard segment that is not last.
    """
    parts = _split(path)
    segments: list[PathSegment] = []
    seen: set[str] = set()

    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        if part == WILDCARD:
            segment = PathSegment(part, "wildcard", WILDCARD)
        elif part.startswith(":"):
            optional = part.endswith("?")
            name = part[1:-1] if optional else part[1:]
            if not name:
                msg = f"Route {path!r}: empty parameter name in segment {part!r}"
                raise ConfigurationError(msg)
            segment = PathSegment(part, "optional" if optional else "param", name)
        else:
            segment = PathSegment(part)

        if segment.kind in ("optional", "wildcard") and not last:
            msg = f"Route {path!r}: {part!r} is only allowed as the last segment"
            raise ConfigurationError(msg)
        if segment.name is not None:
            if segment.name in seen:
                msg = f"Route {path!r}: duplicate parameter name {segment.name!r}"
                raise ConfigurationError(msg)
            seen.add(segment.name)
        segments.append(segment)

    return segments


def _split(path: str) -> list[str]:
    stripped = path.strip("/")
    return stripped.split("/") if stripped else []


def _has_trailing_slash(path: str) -> bool:
    return len(path) > 1 and path.endswith("/")


@dataclass(frozen=True, slots=True)
class _Entry:
    """A registered route with its parsed pattern."""

    route: Route
    segments: tuple[PathSegment, ...]
    trailing_slash: bool


class Router:
    """Route table with ordered ``:param`` matching.

    Usage::

        router = Router()
        router.add(Route("/users/:userId", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/lev")
        match.path_params  # {"userId": "lev"}

    ``case_sensitive=False`` compares literal segments case-insensitively
    (captured values keep their case). ``strict_routing=False`` ignores a
    trailing slash. ``GET`` routes also answer ``HEAD``.
    """

    __slots__ = ("_case_sensitive", "_compiled", "_entries", "_strict_routing")

    def __init__(self, *, case_sensitive: bool = False, strict_routing: bool = False) -> None:
        self._entries: list[_Entry] = []
        self._compiled = False
        self._case_sensitive = case_sensitive
        self._strict_routing = strict_routing

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if not route.path.startswith("/"):
            msg = f"Route path must start with '/': {route.path!r}"
            raise ConfigurationError(msg)

        self._entries.append(
            _Entry(
                route=route,
                segments=tuple(parse_path(route.path)),
                trailing_slash=_has_trailing_slash(route.path),
            )
        )

    def register(self, method: str, path: str, handler: Handler, name: str | None = None) -> Route:
        """Build and add a single-method route. Returns the Route."""
        route = Route(path=path, handler=handler, methods=frozenset({method.upper()}), name=name)
        self.add(route)
        return route

    @property
    def routes(self) -> list[Route]:
        """All registered routes in registration order."""
        return [entry.route for entry in self._entries]

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self._entries)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against the registered routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        method = method.upper()
        parts = _split(path)
        trailing = _has_trailing_slash(path)
        allowed: set[str] = set()

        for entry in self._entries:
            if self._strict_routing and entry.trailing_slash != trailing:
                continue
            params = self._match_segments(entry.segments, parts)
            if params is None:
                continue
            methods = _effective_methods(entry.route.methods)
            if method in methods:
                return RouteMatch(route=entry.route, path_params=params)
            allowed.update(methods)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")

    def _match_segments(
        self,
        segments: tuple[PathSegment, ...],
        parts: list[str],
    ) -> dict[str, str] | None:
        """Bind *parts* against *segments*; None when they do not fit."""
        params: dict[str, str] = {}

        for index, segment in enumerate(segments):
            if segment.kind == "wildcard":
                params[WILDCARD] = "/".join(parts[index:])
                return params

            if segment.kind == "optional":
                rest = parts[index:]
                if len(rest) > 1 or (rest and not rest[0]):
                    return None
                params[segment.name or ""] = rest[0] if rest else ""
                return params

            if index >= len(parts):
                return None
            part = parts[index]

            if segment.kind == "param":
                if not part:
                    return None
                params[segment.name or ""] = part
            elif not self._same_literal(segment.value, part):
                return None

        if len(parts) != len(segments):
            return None
        return params

    def _same_literal(self, expected: str, actual: str) -> bool:
        if self._case_sensitive:
            return expected == actual
        return expected.lower() == actual.lower()


def _effective_methods(methods: frozenset[str]) -> frozenset[str]:
    if "GET" in methods and "HEAD" not in methods:
        return methods | {"HEAD"}
    return methods
