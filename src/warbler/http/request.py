"""The per-request context handed to handlers and middleware.

Everything that arrives with the ASGI scope (method, path, headers,
query string, cookies) is parsed up front into a frozen ``Request``.
The body is different: it is pulled from ASGI ``receive`` the first time
a handler asks for it, checked against ``AppConfig.body_limit``, and
kept for later calls, so ``json()`` after ``text()`` costs nothing.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from warbler._internal.types import Receive, Scope
from warbler.errors import MissingFile, PayloadTooLarge
from warbler.http.binding import FORM, bind, decode
from warbler.http.cookies import parse_cookies
from warbler.http.forms import (
    MULTIPART,
    URLENCODED,
    FormData,
    UploadFile,
    media_type,
    parse_form_data,
)
from warbler.http.headers import Headers
from warbler.http.query import QueryParams

_DEFAULT_BODY_LIMIT = 4 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request.

    Lookups that may miss return a default instead of raising::

        request.query_value("name", "guest")   # /hello?name=Lev
        request.header("firstname")            # FirstName: Lev
        request.cookie("lastname")             # Cookie: lastname=Tempest
        request.param("userId")                # /users/:userId
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: Mapping[str, str]
    cookies: Mapping[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    body_limit: int

    _receive: Receive
    # Raw body and parsed form; shared by copies made with with_path_params()
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        path_params: Mapping[str, str] | None = None,
        *,
        body_limit: int = _DEFAULT_BODY_LIMIT,
    ) -> Request:
        headers = Headers(tuple(scope.get("headers", ())))
        server, client = scope.get("server"), scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            path_params=dict(path_params or {}),
            cookies=parse_cookies(headers.get("cookie", "")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            body_limit=body_limit,
            _receive=receive,
        )

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Copy bound to a matched route; body already read stays readable."""
        return replace(self, path_params=path_params, _cache=self._cache)

    # -- Metadata --

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """Declared ``Content-Length``; None when absent or not a number."""
        value = (self.headers.get("content-length") or "").strip()
        return int(value) if value.isdigit() else None

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        query = self.query.raw.decode("latin-1")
        return f"{self.path}?{query}" if query else self.path

    def query_value(self, name: str, default: str = "") -> str:
        value = self.query.get(name)
        return default if value is None else value

    def header(self, name: str, default: str = "") -> str:
        value = self.headers.get(name)
        return default if value is None else value

    def cookie(self, name: str, default: str = "") -> str:
        return self.cookies.get(name, default)

    def param(self, name: str, default: str = "") -> str:
        return self.path_params.get(name, default)

    # -- Body --

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield body chunks straight from ASGI, bypassing the cache."""
        more = True
        while more:
            message = await self._receive()
            more = message.get("more_body", False)
            if chunk := message.get("body", b""):
                yield chunk

    async def body(self) -> bytes:
        """The whole body, read once.

        Raises ``PayloadTooLarge`` as soon as the declared or received
        size passes ``body_limit``.
        """
        cached = self._cache.get("_body")
        if cached is not None:
            return cached

        declared = self.content_length
        if declared is not None and declared > self.body_limit:
            raise PayloadTooLarge(self.body_limit)

        buffer = bytearray()
        async for chunk in self.stream():
            buffer.extend(chunk)
            if len(buffer) > self.body_limit:
                raise PayloadTooLarge(self.body_limit)

        self._cache["_body"] = data = bytes(buffer)
        return data

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """``json.loads`` of the body; ``json.JSONDecodeError`` propagates."""
        return json.loads(await self.body())

    async def xml(self) -> ET.Element:
        """Root element of the body parsed as XML."""
        return ET.fromstring((await self.body()).strip())

    async def form(self) -> FormData:
        """The body as a URL-encoded or multipart form.

        A request without Content-Type is read as URL-encoded.

        Raises:
            UnsupportedContentType: Content-Type is not a form encoding.
            MalformedBody: the body does not parse.
        """
        if "_form" not in self._cache:
            raw = await self.body()
            self._cache["_form"] = parse_form_data(raw, self.content_type or URLENCODED)
        return self._cache["_form"]

    async def form_value(self, name: str, default: str = "") -> str:
        value = (await self.form()).get(name)
        return default if value is None else value

    async def form_file(self, name: str) -> UploadFile:
        """File uploaded under multipart field *name*; ``MissingFile`` if none."""
        upload = (await self.form()).files.get(name)
        if upload is None:
            raise MissingFile(name)
        return upload

    async def bind[T](self, target: type[T]) -> T:
        """Decode the body into a *target* dataclass, chosen by Content-Type.

        Form bodies go through ``form()`` so the parse is shared with
        ``form_value`` and ``form_file``.
        """
        kind = media_type(self.content_type)
        if kind in (URLENCODED, MULTIPART):
            return bind(target, await self.form(), tag=FORM.tag, content_type=kind)
        return decode(self.content_type, await self.body(), target)

    def bind_query[T](self, target: type[T]) -> T:
        """Fill a *target* dataclass from the query string (``query`` tag)."""
        return bind(target, self.query, tag="query", content_type="query string")
