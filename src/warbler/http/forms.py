"""Request forms: URL-encoded bodies and multipart uploads.

URL-encoded bodies go through ``urllib.parse``; multipart bodies through
``python-multipart``'s callback parser. Both produce a ``FormData`` whose
string fields read like ``QueryParams`` and whose files are ``UploadFile``s.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any
from urllib.parse import parse_qs

from python_multipart.exceptions import FormParserError
from python_multipart.multipart import MultipartParser, parse_options_header

from warbler.errors import MalformedBody, UnsupportedContentType

URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    """One file part of a multipart form.

    The payload is held in memory; ``AppConfig.body_limit`` bounds it.
    ``filename`` has any client-side directory part stripped.
    """

    field_name: str
    filename: str
    content_type: str
    size: int
    _content: bytes = field(repr=False)

    async def read(self) -> bytes:
        return self._content

    async def save(self, path: str | Path) -> Path:
        """Write the payload to *path*, creating parent directories.

        The file is closed before this returns or raises; ``OSError``
        reaches the caller.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as out:
            out.write(self._content)
        return target

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Parsed form fields plus uploaded files.

    ``form["name"]`` and ``form.get("name")`` give the first value,
    ``form.get_list("tag")`` all of them. ``form.files["file"]`` is the
    first upload of a field, ``form.get_files("file")`` every one.
    """

    __slots__ = ("_fields", "_uploads")

    def __init__(
        self,
        fields: Mapping[str, list[str]],
        uploads: Mapping[str, list[UploadFile]] | None = None,
    ) -> None:
        self._fields = dict(fields)
        self._uploads = dict(uploads or {})

    def __getitem__(self, key: str) -> str:
        return self._fields[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __repr__(self) -> str:
        first = {k: v[0] for k, v in self._fields.items()}
        return f"FormData({first!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._fields.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        return list(self._fields.get(key, ()))

    @property
    def files(self) -> Mapping[str, UploadFile]:
        return {name: uploads[0] for name, uploads in self._uploads.items() if uploads}

    def get_files(self, key: str) -> list[UploadFile]:
        return list(self._uploads.get(key, ()))


def media_type(content_type: str | None) -> str:
    """Normalize a Content-Type header to its bare, lower-cased media type.

    ``"Multipart/Form-Data; boundary=x"`` -> ``"multipart/form-data"``
    """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into ``FormData``.

    Raises:
        UnsupportedContentType: *content_type* is not a form encoding.
        MalformedBody: the body does not parse as its declared encoding.
    """
    kind = media_type(content_type)

    if kind == URLENCODED:
        return _parse_urlencoded(body)

    if kind == MULTIPART:
        return _parse_multipart(body, content_type)

    raise UnsupportedContentType(content_type)


def _parse_urlencoded(body: bytes) -> FormData:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedBody(URLENCODED, str(exc)) from exc
    return FormData(parse_qs(text, keep_blank_values=True))


def _client_filename(raw: bytes) -> str:
    """Strip any directory part a client put in a multipart filename.

    Raises ``MalformedBody`` when nothing usable is left (``.``, ``..``).
    """
    name = raw.decode("utf-8", errors="replace")
    base = PurePosixPath(PureWindowsPath(name).name).name
    if base in ("", ".", ".."):
        raise MalformedBody(MULTIPART, f"invalid filename {name!r}")
    return base


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse a multipart body with python-multipart's streaming parser.

    Header names and values may arrive split across callbacks, so they are
    accumulated until ``on_header_end``.
    """
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if not boundary:
        raise MalformedBody(MULTIPART, "missing boundary parameter")

    data: dict[str, list[str]] = {}
    files: dict[str, list[UploadFile]] = {}

    header_name = bytearray()
    header_value = bytearray()
    part_headers: dict[bytes, bytes] = {}
    part_data = bytearray()

    def on_part_begin() -> None:
        part_headers.clear()
        part_data.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        part_data.extend(chunk[start:end])

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_name.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        part_headers[bytes(header_name).lower()] = bytes(header_value)
        header_name.clear()
        header_value.clear()

    def on_part_end() -> None:
        _, params = parse_options_header(part_headers.get(b"content-disposition"))
        raw_name = params.get(b"name")
        if raw_name is None:
            return
        name = raw_name.decode("utf-8", errors="replace")
        raw_filename = params.get(b"filename")

        # An empty file input arrives as filename=""; it is a plain field
        if not raw_filename:
            data.setdefault(name, []).append(part_data.decode("utf-8", errors="replace"))
            return

        content = bytes(part_data)
        ct = part_headers.get(b"content-type", b"application/octet-stream")
        files.setdefault(name, []).append(
            UploadFile(
                field_name=name,
                filename=_client_filename(raw_filename),
                content_type=ct.decode("latin-1"),
                size=len(content),
                _content=content,
            )
        )

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except FormParserError as exc:
        raise MalformedBody(MULTIPART, str(exc)) from exc

    return FormData(data, files)
