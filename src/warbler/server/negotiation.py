"""Turn whatever a route handler returned into something sendable.

Strings become plain text and mappings or dataclasses become sorted
JSON. A file is checked for existence before any header goes out.
"""

import dataclasses
from typing import Any

from warbler.errors import NotFound
from warbler.http.response import FileResponse, Redirect, Response, json_response

AnyResponse = Response | FileResponse


def negotiate(value: Any) -> AnyResponse:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``FileResponse``        -> pass through (``NotFound`` if the file is gone)
    3. ``Redirect``            -> 302 with Location header
    4. ``str``                 -> 200, text/plain
    5. ``bytes``               -> 200, application/octet-stream
    6. ``dict`` / ``list``     -> 200, compact JSON with sorted keys
    7. dataclass instance      -> 200, compact JSON with sorted keys
    8. ``(value, int)``        -> negotiate value, override status
    9. ``(value, int, dict)``  -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case FileResponse():
            if not value.path.is_file():
                raise NotFound(f"File not found: {value.path.name}")
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return json_response(value)
        case (body, int() as status):
            return negotiate(body).with_status(status)
        case (body, int() as status, dict() as headers):
            return negotiate(body).with_status(status).with_headers(headers)
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return json_response(value)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return str, bytes, dict, list, a dataclass, Response, "
                "FileResponse or Redirect."
            )
            raise TypeError(msg)
