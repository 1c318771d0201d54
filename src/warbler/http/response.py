"""What handlers return: text or JSON ``Response``s, redirects and files.

All three are frozen. ``.with_*()`` methods hand back modified copies, so
a response can be built up step by step::

    Response("Created").with_status(201).with_header("X-Id", "7")
"""

import dataclasses
import json
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Self
from urllib.parse import quote

from warbler.http.cookies import SetCookie

TEXT_PLAIN = "text/plain; charset=utf-8"
APPLICATION_JSON = "application/json"
OCTET_STREAM = "application/octet-stream"

type HeaderList = tuple[tuple[str, str], ...]


class _HeaderOps:
    """``with_status``/``with_header``/... shared by Response and FileResponse."""

    __slots__ = ()

    headers: HeaderList

    def with_status(self, status: int) -> Self:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Self:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Self:
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Self:
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """First value of header *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((v for k, v in self.headers if k.lower() == wanted), None)


@dataclass(frozen=True, slots=True)
class Response(_HeaderOps):
    """A buffered response; *body* is sent as UTF-8 when it is a str."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = TEXT_PLAIN
    headers: HeaderList = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_cookie(self, name: str, value: str, **options: Any) -> "Response":
        """Add a ``Set-Cookie``. *options* are ``SetCookie`` fields
        (``max_age``, ``path``, ``domain``, ``secure``, ``httponly``,
        ``samesite``)."""
        return replace(self, cookies=(*self.cookies, SetCookie(name, value, **options)))

    def without_cookie(self, name: str, path: str = "/") -> "Response":
        """Tell the client to drop cookie *name* (``Max-Age=0``)."""
        return self.with_cookie(name, "", max_age=0, path=path)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """Send the client to *url* (302 unless told otherwise)."""

    url: str
    status: int = 302
    headers: HeaderList = ()


@dataclass(frozen=True, slots=True)
class FileResponse(_HeaderOps):
    """A file on disk, streamed to the client in ``chunk_size`` pieces.

    With ``attachment=True`` the response carries
    ``Content-Disposition: attachment; filename="<filename>"`` so browsers
    save it instead of displaying it. ``filename`` defaults to the file's
    own name.
    """

    path: Path
    filename: str | None = None
    attachment: bool = False
    status: int = 200
    content_type: str | None = None
    headers: HeaderList = ()
    chunk_size: int = 64 * 1024

    @property
    def download_name(self) -> str:
        """The file name advertised to the client."""
        return self.filename or self.path.name

    @property
    def media_type(self) -> str:
        """Explicit content type, or one guessed from the download name."""
        if self.content_type is not None:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.download_name)
        if guessed is None:
            return OCTET_STREAM
        if guessed.startswith("text/"):
            return f"{guessed}; charset=utf-8"
        return guessed

    @property
    def content_disposition(self) -> str | None:
        """``Content-Disposition`` value, or None for inline files."""
        if not self.attachment:
            return None
        return content_disposition(self.download_name)


def content_disposition(filename: str) -> str:
    """Build an ``attachment`` disposition for *filename*.

    ASCII names are quoted as-is; other names are percent-encoded.
    """
    if filename.isascii():
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f'attachment; filename="{quote(filename)}"'


def send_file(path: str | Path, *, content_type: str | None = None) -> FileResponse:
    """Serve *path* inline."""
    return FileResponse(Path(path), content_type=content_type)


def download(path: str | Path, filename: str | None = None) -> FileResponse:
    """Serve *path* as an attachment, optionally under another *filename*."""
    return FileResponse(Path(path), filename=filename, attachment=True)


def to_jsonable(value: Any) -> Any:
    """Prepare *value* for compact JSON output.

    Keys are emitted in sorted order. Dataclass instances become objects
    keyed by their ``json`` field tag, or the field name.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {
            f.metadata.get("json", f.name): getattr(value, f.name)
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def json_response(value: Any, *, status: int = 200) -> Response:
    """Serialize *value* as compact JSON.

    ``{"username": "Lev", "name": "Lev Tempest"}`` becomes
    ``{"name":"Lev Tempest","username":"Lev"}``.
    """
    body = json.dumps(
        to_jsonable(value),
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return Response(body=body, status=status, content_type=APPLICATION_JSON)
