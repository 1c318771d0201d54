"""ASGI response sending: translates warbler Response types to ASGI messages.

Handles single-body responses and chunked file streaming.
"""

import logging

from warbler._internal.types import Send
from warbler.http.response import FileResponse, Response

logger = logging.getLogger("warbler.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a warbler Response into ASGI send() calls.

    ``head=True`` keeps the headers (including Content-Length) and drops
    the body.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(_encode_headers(response.headers))
    raw_headers.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


async def send_file_response(response: FileResponse, send: Send, *, head: bool = False) -> None:
    """Stream a file from disk in ``chunk_size`` pieces.

    The handle is closed on every exit path, including a client that
    disconnects mid-stream.
    """
    fh = response.path.open("rb")
    try:
        size = response.path.stat().st_size
        raw_headers: list[tuple[bytes, bytes]] = [
            (b"content-type", response.media_type.encode("latin-1")),
            (b"content-length", str(size).encode("latin-1")),
        ]
        disposition = response.content_disposition
        if disposition is not None:
            raw_headers.append((b"content-disposition", disposition.encode("latin-1")))
        raw_headers.extend(_encode_headers(response.headers))

        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": raw_headers,
            }
        )

        if head or not _body_allowed(response.status):
            await send({"type": "http.response.body", "body": b""})
            return

        while chunk := fh.read(response.chunk_size):
            await send({"type": "http.response.body", "body": chunk, "more_body": True})
        await send({"type": "http.response.body", "body": b"", "more_body": False})
    finally:
        fh.close()
        logger.debug("Closed %s", response.path)
