"""Tests for warbler.errors and the server error pipeline."""

import logging
from pathlib import Path

import pytest

from warbler import App, AppConfig, Response, download
from warbler.errors import (
    DecodeError,
    HTTPError,
    MalformedBody,
    MethodNotAllowed,
    MissingFile,
    NotFound,
    PayloadTooLarge,
    UnsupportedContentType,
    WarblerError,
)
from warbler.testing import TestClient


class TestHierarchy:
    def test_http_errors_are_warbler_errors(self) -> None:
        assert issubclass(HTTPError, WarblerError)

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (NotFound(), 404),
            (MethodNotAllowed(frozenset({"GET"})), 405),
            (PayloadTooLarge(10), 413),
            (MalformedBody("application/json", "bad"), 400),
            (UnsupportedContentType("text/csv"), 422),
            (MissingFile("file"), 400),
        ],
    )
    def test_status(self, error: HTTPError, status: int) -> None:
        assert error.status == status

    def test_decode_errors_share_base(self) -> None:
        for error in (MalformedBody("x", "y"), UnsupportedContentType("x"), MissingFile("f")):
            assert isinstance(error, DecodeError)

    def test_messages(self) -> None:
        assert str(NotFound()) == "404: Not Found"
        assert MalformedBody("application/json", "boom").detail == (
            "Malformed application/json body: boom"
        )
        assert UnsupportedContentType("").detail == "Unsupported content type: <missing>"

    def test_method_not_allowed_header(self) -> None:
        error = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert error.headers == (("Allow", "GET, POST"),)


def _app(**config: object) -> App:
    return App(AppConfig(access_log=False, **config))  # type: ignore[arg-type]


class TestErrorPipeline:
    async def test_http_error_plain_text(self) -> None:
        app = _app()

        @app.get("/gone")
        def gone() -> str:
            raise NotFound("No such thing")

        async with TestClient(app) as client:
            response = await client.get("/gone")
            assert response.status == 404
            assert response.text == "No such thing"
            assert response.content_type == "text/plain; charset=utf-8"

    async def test_method_not_allowed_carries_allow(self) -> None:
        app = _app()
        app.get("/hello")(lambda: "hi")

        async with TestClient(app) as client:
            response = await client.request("DELETE", "/hello")
            assert response.status == 405
            assert response.header("allow") == "GET, HEAD"

    async def test_status_handler(self) -> None:
        app = _app()

        @app.error(404)
        def not_found(request) -> str:
            return f"Nothing at {request.path}"

        async with TestClient(app) as client:
            response = await client.get("/missing")
            assert response.status == 404
            assert response.text == "Nothing at /missing"

    async def test_exception_type_handler_before_status(self) -> None:
        app = _app()

        @app.error(400)
        def generic() -> str:
            return "generic"

        @app.error(DecodeError)
        def decode_failed(request, exc: DecodeError):
            return {"error": exc.detail}

        @app.post("/strict")
        async def strict(request) -> str:
            raise MalformedBody("application/json", "nope")

        async with TestClient(app) as client:
            response = await client.post("/strict")
            assert response.status == 400
            assert response.text == '{"error":"Malformed application/json body: nope"}'

    async def test_catch_all_does_not_shadow_status_handlers(self) -> None:
        app = _app()

        @app.error(Exception)
        def everything() -> str:
            return "catch-all"

        @app.error(404)
        def not_found() -> str:
            return "custom 404"

        async with TestClient(app) as client:
            assert (await client.get("/missing")).text == "custom 404"

    async def test_unhandled_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        app = _app()

        @app.get("/boom")
        def boom() -> str:
            raise RuntimeError("kaboom")

        with caplog.at_level(logging.ERROR, logger="warbler.server"):
            async with TestClient(app) as client:
                response = await client.get("/boom")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "500 GET /boom" in caplog.text
        assert "kaboom" in caplog.text

    async def test_debug_500_shows_traceback(self) -> None:
        app = _app(debug=True)

        @app.get("/boom")
        def boom() -> str:
            raise RuntimeError("kaboom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
            assert response.status == 500
            assert "RuntimeError: kaboom" in response.text

    async def test_500_handler(self) -> None:
        app = _app()

        @app.get("/boom")
        def boom() -> str:
            raise RuntimeError("kaboom")

        @app.error(500)
        async def oops(request, exc) -> str:
            return f"oops: {exc}"

        async with TestClient(app) as client:
            response = await client.get("/boom")
            assert response.status == 500
            assert response.text == "oops: kaboom"

    async def test_os_error_during_upload_is_500(self, tmp_path) -> None:
        app = _app()
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")

        @app.post("/upload")
        async def upload(request) -> str:
            file = await request.form_file("file")
            await file.save(blocker / file.filename)
            return "Upload Success"

        async with TestClient(app) as client:
            response = await client.post("/upload", files={"file": ("a.txt", b"x")})
            assert response.status == 500

    async def test_unsendable_response_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        app = _app()

        @app.get("/name")
        def name() -> Response:
            return Response("x").with_header("X-Name", "Łukasz")

        with caplog.at_level(logging.ERROR, logger="warbler.server"):
            async with TestClient(app) as client:
                response = await client.get("/name")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert response.header("X-Name") is None
        assert "500 GET /name" in caplog.text

    async def test_unopenable_file_is_500(self, tmp_path, monkeypatch) -> None:
        source = tmp_path / "contoh.txt"
        source.write_text("data")
        app = _app()

        @app.get("/download")
        def download_file():
            return download(source)

        def denied_open(self: Path, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "open", denied_open)
        async with TestClient(app) as client:
            response = await client.get("/download")
            assert response.status == 500

    async def test_payload_too_large(self) -> None:
        app = _app(body_limit=8)

        @app.post("/echo")
        async def echo(request) -> bytes:
            return await request.body()

        async with TestClient(app) as client:
            response = await client.post("/echo", body=b"x" * 100)
            assert response.status == 413
