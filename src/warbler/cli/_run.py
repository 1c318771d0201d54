"""``warbler run``: serve an app, single process or pre-forked."""

import argparse
import sys

from warbler.cli._resolve import resolve_app
from warbler.errors import ConfigurationError
from warbler.server.runner import run_server


def run_command(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it with uvicorn.

    CLI flags override the app's ``AppConfig``. With pre-fork the import
    string is handed to every worker, so it must name the App object
    itself rather than a factory.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app._ensure_frozen()

    try:
        run_server(
            app,
            args.host or app.config.host,
            args.port or app.config.port,
            prefork=args.prefork or app.config.prefork,
            workers=args.workers if args.workers is not None else app.config.workers,
            app_path=args.app,
            idle_timeout=app.config.idle_timeout,
            log_level=app.config.log_level,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
