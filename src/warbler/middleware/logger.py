"""Request logging middleware.

Logs one line per request after the response is produced::

    200 GET /hello?name=Lev 0.4ms

Errors raised further down the chain are logged with their status and
re-raised, so the error pipeline still answers them.
"""

import logging
import time

from warbler.errors import HTTPError
from warbler.http.request import Request
from warbler.middleware.protocol import AnyResponse, Next


class RequestLogger:
    """Before/after request logging through the ``warbler.access`` logger.

    Usage::

        app.add_middleware(RequestLogger())
    """

    __slots__ = ("level", "logger")

    def __init__(self, logger_name: str = "warbler.access", level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(logger_name)
        self.level = level

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        start = time.perf_counter()
        self.logger.debug("--> %s %s", request.method, request.url)
        try:
            response = await next(request)
        except HTTPError as exc:
            self._log(exc.status, request, start)
            raise
        except Exception:
            self._log(500, request, start)
            raise
        self._log(response.status, request, start)
        return response

    def _log(self, status: int, request: Request, start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        self.logger.log(
            self.level,
            "%d %s %s %.1fms",
            status,
            request.method,
            request.url,
            elapsed_ms,
        )
