"""Find the App named by a ``"module:attribute"`` string."""

import importlib
import os
import sys

from warbler.app import App


def resolve_app(import_string: str) -> App:
    """Import *import_string* and return the warbler App it names.

    ``"learn.app"`` is short for ``"learn.app:app"``. The current directory
    goes on ``sys.path`` first, so ``warbler run app:app`` works from the
    directory holding ``app.py``. A zero-argument factory such as
    ``create_app`` is called.

    Raises:
        ModuleNotFoundError: the module does not import.
        AttributeError: the module has no such attribute.
        TypeError: the attribute is neither an App nor a factory for one.
    """
    module_name, _, attr = import_string.partition(":")

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    target = getattr(importlib.import_module(module_name), attr or "app")

    if not isinstance(target, App) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"Factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, App):
        msg = f"{import_string!r} is a {type(target).__name__}, not a warbler.App instance"
        raise TypeError(msg)
    return target
