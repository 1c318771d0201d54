"""Tests for the learn example."""

import pytest

from warbler.testing import TestClient


@pytest.fixture
def learn_app(example_module, tmp_path):
    """The exercise app, saving uploads under a temporary directory."""
    return example_module.create_app(upload_dir=tmp_path / "target")


@pytest.fixture
def contoh(example_module) -> bytes:
    return (example_module.SOURCE_DIR / "contoh.txt").read_bytes()


class TestRouting:
    async def test_hello_world(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello, World!"
            assert response.content_type == "text/plain; charset=utf-8"

    async def test_route_parameters(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/users/lev/orders/10")
            assert response.status == 200
            assert response.text == "Get user lev orders 10"

    async def test_unknown_path_is_404(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/users/lev")
            assert response.status == 404

    @pytest.mark.parametrize("path", ["/api/hello", "/api/world", "/web/hello", "/web/world"])
    async def test_groups_share_handler(self, example_app, path: str) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(path)
            assert response.status == 200
            assert response.text == "Hello, World!"


class TestRequestContext:
    async def test_query_parameter(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello?name=Lev")
            assert response.text == "Hello, Lev!"

    async def test_query_parameter_default(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello")
            assert response.text == "Hello, guest!"

    async def test_header_and_cookie(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(
                "/request",
                headers={"firstname": "Lev"},
                cookies={"lastname": "Tempest"},
            )
            assert response.status == 200
            assert response.text == "Hello, Lev Tempest!"

    async def test_form_value(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/hello", form={"name": "Lev"})
            assert response.status == 200
            assert response.text == "Hello, Lev!"


class TestBodies:
    async def test_upload_saves_file(self, learn_app, contoh: bytes, tmp_path) -> None:
        async with TestClient(learn_app) as client:
            response = await client.post(
                "/upload",
                files={"file": ("contoh.txt", contoh, "text/plain")},
            )
            assert response.status == 200
            assert response.text == "Upload Success"
        assert (tmp_path / "target" / "contoh.txt").read_bytes() == contoh

    async def test_upload_without_file_is_400(self, learn_app) -> None:
        async with TestClient(learn_app) as client:
            response = await client.post("/upload", files={}, form={"other": "x"})
            assert response.status == 400

    async def test_login_reads_json_body(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/login",
                body=b'{"username":"Lev","password":"secret"}',
                headers={"Content-Type": "application/json"},
            )
            assert response.status == 200
            assert response.text == "Hello, Lev!"

    async def test_login_malformed_json(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/login",
                body=b"{not json",
                headers={"Content-Type": "application/json"},
            )
            assert response.status == 400
            assert response.text.startswith("Malformed JSON body")

    async def test_login_json_array(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/login", json=["Lev"])
            assert response.status == 400
            assert "expected a JSON object" in response.text

    async def test_register_json(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register",
                json={"username": "Lev", "password": "secret", "name": "Lev Tempest"},
            )
            assert response.status == 200
            assert response.text == "Register success, username: Lev"

    async def test_register_form(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register",
                body=b"username=Lev&password=secret&name=Lev+Tempest",
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            assert response.status == 200
            assert response.text == "Register success, username: Lev"

    async def test_register_xml(self, example_app) -> None:
        body = b"""
        <RegisterRequest>
            <username>Lev</username>
            <password>secret</password>
            <name>Lev Tempest</name>
        </RegisterRequest>
        """
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register",
                body=body,
                headers={"Content-Type": "application/xml"},
            )
            assert response.status == 200
            assert response.text == "Register success, username: Lev"

    async def test_register_unsupported_content_type(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register",
                body=b"username=Lev",
                headers={"Content-Type": "text/csv"},
            )
            assert response.status == 422


class TestResponses:
    async def test_json_keys_sorted(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/user", headers={"Accept": "application/json"})
            assert response.status == 200
            assert response.content_type == "application/json"
            assert response.text == '{"name":"Lev Tempest","username":"Lev"}'

    async def test_download(self, example_app, contoh: bytes) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/download")
            assert response.status == 200
            assert (
                response.header("content-disposition")
                == 'attachment; filename="contoh-downloaded.txt"'
            )
            assert response.body == contoh
            assert response.text == "this is sample file for upload"

    async def test_download_missing_source_is_404(self, example_module, tmp_path) -> None:
        app = example_module.create_app(source_dir=tmp_path)
        async with TestClient(app) as client:
            response = await client.get("/download")
            assert response.status == 404
