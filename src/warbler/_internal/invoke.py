"""Call sync or async handlers uniformly.

Handlers, error handlers and lifecycle hooks can be ``def`` or
``async def``; the await check lives here and nowhere else.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable.

    Usage::

        result = await invoke(route.handler, request=request)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
