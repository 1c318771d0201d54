"""Warbler: a small ASGI web framework with ``:param`` routing.

Basic usage::

    from warbler import App

    app = App()

    @app.get("/hello")
    def hello(request):
        return f"Hello, {request.query_value('name', 'guest')}!"

    @app.get("/users/:userId/orders/:orderId")
    def order(userId: str, orderId: str):
        return f"Get user {userId} orders {orderId}"

    app.run()
"""

import importlib

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "DecodeError",
    "FileResponse",
    "FormData",
    "Group",
    "HTTPError",
    "MalformedBody",
    "MethodNotAllowed",
    "Middleware",
    "MissingFile",
    "Next",
    "NotFound",
    "PayloadTooLarge",
    "Redirect",
    "Request",
    "RequestLogger",
    "Response",
    "UnsupportedContentType",
    "UploadFile",
    "WarblerError",
    "decode",
    "download",
    "is_child",
    "json_response",
    "send_file",
]

# Public name -> defining module. Imported on first attribute access.
_LAZY_IMPORTS: dict[str, str] = {
    "App": "warbler.app",
    "AppConfig": "warbler.config",
    "Group": "warbler.routing.group",
    "Request": "warbler.http.request",
    "FormData": "warbler.http.forms",
    "UploadFile": "warbler.http.forms",
    "decode": "warbler.http.binding",
    "Response": "warbler.http.response",
    "Redirect": "warbler.http.response",
    "FileResponse": "warbler.http.response",
    "download": "warbler.http.response",
    "send_file": "warbler.http.response",
    "json_response": "warbler.http.response",
    "AnyResponse": "warbler.middleware.protocol",
    "Middleware": "warbler.middleware.protocol",
    "Next": "warbler.middleware.protocol",
    "RequestLogger": "warbler.middleware.logger",
    "is_child": "warbler.server.runner",
    "WarblerError": "warbler.errors",
    "ConfigurationError": "warbler.errors",
    "HTTPError": "warbler.errors",
    "NotFound": "warbler.errors",
    "MethodNotAllowed": "warbler.errors",
    "PayloadTooLarge": "warbler.errors",
    "DecodeError": "warbler.errors",
    "MalformedBody": "warbler.errors",
    "UnsupportedContentType": "warbler.errors",
    "MissingFile": "warbler.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warbler`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_path), name)
