"""``warbler routes``: print the route table of an app.

Rows come out in registration order, which is also match order: for two
patterns that both fit a path, the upper row wins.
"""

import argparse
import sys

from warbler.cli._resolve import resolve_app
from warbler.routing.route import Route
from warbler.routing.router import parse_path

_HEADER = ("METHOD", "PATH", "PARAMS", "HANDLER")


def _row(route: Route) -> tuple[str, str, str, str]:
    params = ", ".join(seg.name or "" for seg in parse_path(route.path) if seg.is_param)
    handler = getattr(route.handler, "__name__", repr(route.handler))
    if route.name:
        handler = f"{handler} ({route.name})"
    return ", ".join(sorted(route.methods)), route.path, params or "-", handler


def run_routes(args: argparse.Namespace) -> None:
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = [_row(route) for route in app.routes]
    if not rows:
        print("No routes registered.")
        return

    widths = [max(len(row[i]) for row in (_HEADER, *rows)) for i in range(3)]
    for method, path, params, handler in (_HEADER, *rows):
        print(f"{method:<{widths[0]}}  {path:<{widths[1]}}  {params:<{widths[2]}}  {handler}")
