"""Learn: one app covering the classic web-framework exercises.

Demonstrates:
- ``@app.get`` / ``@app.post`` routes and ``:param`` path segments
- query parameters, headers and cookies through the request accessors
- URL-encoded forms, multipart uploads and ``UploadFile.save()``
- reading a raw JSON body
- ``request.bind()`` decoding JSON, XML or form bodies into one dataclass
- compact JSON responses with sorted keys
- file downloads with ``Content-Disposition: attachment``
- route groups sharing one handler

Run:
    python app.py
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from warbler import App, AppConfig, MalformedBody, Request, download

logger = logging.getLogger(__name__)

SOURCE_DIR = Path(__file__).parent / "source"
TARGET_DIR = Path(__file__).parent / "target"


@dataclass(frozen=True, slots=True)
class LoginRequest:
    username: str = ""
    password: str = ""


def _tags(name: str) -> dict[str, str]:
    return {"json": name, "xml": name, "form": name}


@dataclass(frozen=True, slots=True)
class RegisterRequest:
    """Decoded from JSON, XML or form bodies alike."""

    username: str = field(default="", metadata=_tags("username"))
    password: str = field(default="", metadata=_tags("password"))
    name: str = field(default="", metadata=_tags("name"))


def hello_world() -> str:
    return "Hello, World!"


def create_app(
    upload_dir: Path = TARGET_DIR,
    source_dir: Path = SOURCE_DIR,
    config: AppConfig | None = None,
) -> App:
    """Build the exercise app.

    Uploads are saved under *upload_dir*; ``/download`` serves
    ``contoh.txt`` from *source_dir*.
    """
    app = App(config=config or AppConfig(idle_timeout=5.0))

    app.get("/")(hello_world)

    @app.get("/hello")
    def hello(request: Request) -> str:
        name = request.query_value("name", "guest")
        return f"Hello, {name}!"

    @app.get("/request")
    def greet_from_request(request: Request) -> str:
        first = request.header("firstname")
        last = request.cookie("lastname")
        return f"Hello, {first} {last}!"

    @app.get("/users/:userId/orders/:orderId")
    def user_order(userId: str, orderId: str) -> str:  # noqa: N803
        return f"Get user {userId} orders {orderId}"

    @app.post("/hello")
    async def hello_form(request: Request) -> str:
        name = await request.form_value("name")
        return f"Hello, {name}!"

    @app.post("/upload")
    async def upload(request: Request) -> str:
        file = await request.form_file("file")
        saved = await file.save(upload_dir / file.filename)
        logger.info("Saved upload %s (%d bytes)", saved, file.size)
        return "Upload Success"

    @app.post("/login")
    async def login(request: Request) -> str:
        body = await request.json()
        if not isinstance(body, dict):
            raise MalformedBody("application/json", "expected a JSON object")
        credentials = LoginRequest(
            username=body.get("username", ""),
            password=body.get("password", ""),
        )
        return f"Hello, {credentials.username}!"

    @app.post("/register")
    async def register(request: Request) -> str:
        payload = await request.bind(RegisterRequest)
        return f"Register success, username: {payload.username}"

    @app.get("/user")
    def user() -> dict[str, str]:
        return {"username": "Lev", "name": "Lev Tempest"}

    @app.get("/download")
    def download_file():
        return download(source_dir / "contoh.txt", "contoh-downloaded.txt")

    api = app.group("/api")
    api.get("/hello")(hello_world)
    api.get("/world")(hello_world)

    web = app.group("/web")
    web.get("/hello")(hello_world)
    web.get("/world")(hello_world)

    @app.error(json.JSONDecodeError)
    def bad_json(request: Request, exc: json.JSONDecodeError):
        return f"Malformed JSON body: {exc.msg}", 400

    return app


app = create_app()


if __name__ == "__main__":
    app.run()
