"""Type aliases for the ASGI boundary and user-supplied callables."""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

type Message = MutableMapping[str, Any]
type Scope = MutableMapping[str, Any]
type Receive = Callable[[], Awaitable[Message]]
type Send = Callable[[Message], Awaitable[None]]

# Any mix of request, path params, uploads and bound dataclasses
type Handler = Callable[..., Any]

# Takes (), (request) or (request, exc)
type ErrorHandler = Callable[..., Any]
