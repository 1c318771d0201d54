"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

SegmentKind = Literal["literal", "param", "optional", "wildcard"]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Literal:   ``/users``    (kind="literal")
    Param:     ``/:userId``  (kind="param", name="userId")
    Optional:  ``/:name?``   (kind="optional", name="name"; last segment only)
    Wildcard:  ``/*``        (kind="wildcard", name="*"; last segment only)
    """

    value: str
    kind: SegmentKind = "literal"
    name: str | None = None

    @property
    def is_param(self) -> bool:
        return self.kind != "literal"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: Mapping[str, str]
