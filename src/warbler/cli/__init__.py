"""Warbler CLI: serve an app and list its routes.

Entry point registered as ``warbler`` in ``pyproject.toml``::

    [project.scripts]
    warbler = "warbler.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``warbler`` command."""
    parser = argparse.ArgumentParser(
        prog="warbler",
        description="Warbler: a small ASGI web framework.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- warbler run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve an app with uvicorn")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--prefork",
        action="store_true",
        help="Run one worker process per CPU sharing the listening socket",
    )
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count when pre-forking (0=CPU count)",
    )

    # -- warbler routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from warbler.cli._run import run_command

        run_command(args)
    elif args.command == "routes":
        from warbler.cli._routes import run_routes

        run_routes(args)
