"""Serve a warbler App with uvicorn, optionally pre-forked.

Pre-fork binds the listening socket once in the parent and hands it to
several worker processes, each running its own event loop. uvicorn's
multiprocess supervisor does the forking; a worker re-imports the app
from its ``"module:attribute"`` import string.
"""

from __future__ import annotations

import copy
import logging
import multiprocessing
import os
from typing import Any

from warbler.errors import ConfigurationError

logger = logging.getLogger("warbler.server")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(process)d] %(name)s: %(message)s"


def is_child() -> bool:
    """True inside a pre-forked worker process, False in the parent."""
    return multiprocessing.parent_process() is not None


def worker_count(prefork: bool, workers: int) -> int:
    """Number of worker processes to run.

    Without pre-fork the app is served by the current process. With it,
    ``workers=0`` means one worker per CPU.
    """
    if not prefork:
        return 1
    if workers > 0:
        return workers
    return os.cpu_count() or 1


def configure_logging(level: str) -> None:
    """Send warbler's loggers to stderr at *level* (no-op if already set up)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("warbler").setLevel(level.upper())


def log_config(level: str) -> dict[str, Any]:
    """uvicorn's ``dictConfig`` extended to the root and ``warbler`` loggers.

    uvicorn applies ``log_config`` in every worker it spawns, so application
    loggers stay visible in pre-forked workers too.
    """
    from uvicorn.config import LOGGING_CONFIG

    config = copy.deepcopy(LOGGING_CONFIG)
    config["formatters"]["warbler"] = {"format": LOG_FORMAT}
    config["handlers"]["warbler"] = {
        "class": "logging.StreamHandler",
        "formatter": "warbler",
        "stream": "ext://sys.stderr",
    }
    config["root"] = {"handlers": ["warbler"], "level": level.upper()}
    config["loggers"]["warbler"] = {"level": level.upper()}
    return config


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    prefork: bool = False,
    workers: int = 0,
    app_path: str | None = None,
    idle_timeout: float = 5.0,
    log_level: str = "info",
) -> None:
    """Start uvicorn with the given ASGI app.

    Args:
        app: ASGI callable (warbler App instance).
        host: Bind host address.
        port: Bind port number.
        prefork: Run several worker processes sharing one socket.
        workers: Worker count when pre-forking (0 = CPU count).
        app_path: ``"module:attribute"`` import string. Required for
            pre-fork, since each worker imports the app itself.
        idle_timeout: Keep-alive timeout for idle connections (seconds).
        log_level: uvicorn and warbler log level.

    Raises:
        ConfigurationError: pre-fork requested without ``app_path``.
    """
    import uvicorn

    count = worker_count(prefork, workers)
    configure_logging(log_level)

    if count > 1 and app_path is None:
        msg = (
            "Pre-fork needs an import string so each worker can load the app. "
            "Pass app_path='module:app' or use `warbler run module:app --prefork`."
        )
        raise ConfigurationError(msg)

    target = app_path if count > 1 else app
    logger.info("Serving on http://%s:%d (%d worker%s)", host, port, count, "" if count == 1 else "s")

    uvicorn.run(
        target,  # type: ignore[arg-type]
        host=host,
        port=port,
        workers=count if count > 1 else None,
        timeout_keep_alive=max(1, round(idle_timeout)),
        log_level=log_level.lower(),
        log_config=log_config(log_level),
        access_log=False,
    )
