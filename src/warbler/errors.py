"""Warbler exception hierarchy.

Shared across Router, App, handler pipeline, body decoding and middleware
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class WarblerError(Exception):
    """Base for all warbler-specific errors."""


class ConfigurationError(WarblerError):
    """Raised when app configuration or a route definition is invalid.

    Typically raised while registering routes or during ``App._freeze()``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WarblerError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, body decoding, middleware, or handlers. The
    ASGI handler catches these and dispatches to the matching
    ``@app.error()`` handler, or answers with a plain-text body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path, or a served file is missing."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: request body exceeds ``AppConfig.body_limit``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")


class DecodeError(HTTPError):
    """Base for request body decoding failures.

    Subclasses keep *malformed payload* and *unsupported content type*
    apart so callers can tell a broken client from a wrong endpoint.
    """

    def __init__(self, detail: str, status: int = 400) -> None:
        super().__init__(status=status, detail=detail)


class MalformedBody(DecodeError):
    """400: the payload does not parse as its declared content type."""

    def __init__(self, content_type: str, reason: str) -> None:
        super().__init__(f"Malformed {content_type} body: {reason}", status=400)


class UnsupportedContentType(DecodeError):
    """422: no decoder is registered for the request's content type."""

    def __init__(self, content_type: str) -> None:
        shown = content_type or "<missing>"
        super().__init__(f"Unsupported content type: {shown}", status=422)


class MissingFile(DecodeError):
    """400: a multipart form does not carry the requested file field."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"No file uploaded for field {field_name!r}", status=400)
