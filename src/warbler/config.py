"""Application configuration.

``AppConfig`` is a frozen dataclass; change it with ``dataclasses.replace``.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, prefork=True, idle_timeout=5.0)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    app_name: str = "warbler"

    # Routing
    case_sensitive: bool = False  # "/Hello" and "/hello" are distinct when True
    strict_routing: bool = False  # "/hello/" and "/hello" are distinct when True

    # Limits
    body_limit: int = 4 * 1024 * 1024  # 4 MB

    # Pre-fork: one worker process per CPU sharing the listening socket
    prefork: bool = False
    workers: int = 0  # 0 = CPU count when prefork is enabled

    # Connection handling
    idle_timeout: float = 5.0  # keep-alive timeout, seconds

    # Logging
    log_level: str = "info"
    access_log: bool = True
