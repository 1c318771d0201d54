"""Routing: ordered route table with ``:param`` matching.

Routes are registered during setup and frozen when the app compiles.
"""

from warbler.routing.group import Group, join_path
from warbler.routing.route import PathSegment, Route, RouteMatch
from warbler.routing.router import Router, parse_path

__all__ = ["Group", "PathSegment", "Route", "RouteMatch", "Router", "join_path", "parse_path"]
