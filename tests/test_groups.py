"""Tests for warbler.routing.group: prefix groups registered on the app."""

import pytest

from warbler import App, AppConfig
from warbler.routing.group import Group, join_path
from warbler.testing import TestClient


def _app() -> App:
    return App(AppConfig(access_log=False))


class TestJoinPath:
    @pytest.mark.parametrize(
        ("prefix", "path", "expected"),
        [
            ("/api", "/hello", "/api/hello"),
            ("/api/", "hello", "/api/hello"),
            ("/api", "/", "/api"),
            ("/", "/hello", "/hello"),
            ("", "/", "/"),
            ("/api", "/users/:id", "/api/users/:id"),
            ("/api", "/dir/", "/api/dir/"),
        ],
    )
    def test_join(self, prefix: str, path: str, expected: str) -> None:
        assert join_path(prefix, path) == expected


class TestGroup:
    def test_group_prefix_normalized(self) -> None:
        assert _app().group("api/").prefix == "/api"

    def test_routes_registered_with_prefix(self) -> None:
        app = _app()
        api = app.group("/api")

        @api.get("/hello")
        def hello() -> str:
            return "hi"

        assert [(r.path, r.methods) for r in app.routes] == [("/api/hello", frozenset({"GET"}))]

    def test_nested_group(self) -> None:
        app = _app()
        v1 = app.group("/api").group("/v1")
        assert isinstance(v1, Group)

        @v1.post("/users")
        def create() -> str:
            return "created"

        assert app.routes[0].path == "/api/v1/users"
        assert app.routes[0].methods == frozenset({"POST"})

    def test_all_registers_every_method(self) -> None:
        app = _app()

        @app.group("/any").all("/thing")
        def thing() -> str:
            return "ok"

        methods = app.routes[0].methods
        assert {"GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"} <= methods

    async def test_shared_handler_in_two_groups(self) -> None:
        app = _app()

        def hello_world() -> str:
            return "Hello, World!"

        for prefix in ("/api", "/web"):
            group = app.group(prefix)
            group.get("/hello")(hello_world)
            group.get("/world")(hello_world)

        async with TestClient(app) as client:
            for path in ("/api/hello", "/api/world", "/web/hello", "/web/world"):
                response = await client.get(path)
                assert response.status == 200
                assert response.text == "Hello, World!"
            assert (await client.get("/hello")).status == 404

    @pytest.mark.parametrize("verb", ["put", "patch", "delete", "head", "options"])
    def test_verb_helpers(self, verb: str) -> None:
        app = _app()
        getattr(app.group("/g"), verb)("/x")(lambda: "ok")
        assert app.routes[0].methods == frozenset({verb.upper()})
