"""Request middleware.

``RequestLogger`` is installed by default (``AppConfig.access_log``);
anything else is added with ``app.use()`` or ``app.add_middleware()``.
"""

from warbler.middleware.logger import RequestLogger
from warbler.middleware.protocol import AnyResponse, Middleware, Next

__all__ = ["AnyResponse", "Middleware", "Next", "RequestLogger"]
