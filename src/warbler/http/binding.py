"""Body decoding: content-type driven binding of request data to dataclasses.

A request body is decoded in two steps:

1. The normalized media type selects a ``BodyFormat``.  Each format turns
   raw bytes into a *source*: a mapping of tag name to raw value.
2. ``bind()`` walks the target dataclass's fields and looks each one up in
   the source under its per-format tag, coercing to the annotated type.

Field tags come from dataclass field metadata and fall back to the field
name::

    @dataclass(frozen=True, slots=True)
    class RegisterRequest:
        username: str = field(metadata={"json": "username", "xml": "username", "form": "username"})
        password: str = ""
        name: str = ""

    register = decode("application/json", b'{"username": "Lev"}', RegisterRequest)

Supported formats:

- ``application/json`` and ``*/*+json``  (tag ``json``)
- ``application/xml``, ``text/xml`` and ``*/*+xml``  (tag ``xml``)
- ``application/x-www-form-urlencoded``  (tag ``form``)
- ``multipart/form-data``  (tag ``form``; ``UploadFile`` fields bind files)

Query strings bind the same way with the ``query`` tag.
"""

import dataclasses
import json
import types
import typing
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from warbler._internal.multimap import MultiValueMapping
from warbler.errors import MalformedBody, UnsupportedContentType
from warbler.http.forms import FormData, UploadFile, media_type, parse_form_data

_MISSING = object()
_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class BodyFormat:
    """One decoding strategy: a field tag plus a bytes-to-source function."""

    tag: str
    decode: Callable[[bytes, str], Mapping[str, Any]]


def _decode_json(raw: bytes, content_type: str) -> Mapping[str, Any]:
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise MalformedBody("application/json", str(exc)) from exc
    if not isinstance(value, dict):
        raise MalformedBody("application/json", f"expected an object, got {type(value).__name__}")
    return value


def _decode_xml(raw: bytes, content_type: str) -> Mapping[str, Any]:
    try:
        root = ET.fromstring(raw.strip())
    except ET.ParseError as exc:
        raise MalformedBody("application/xml", str(exc)) from exc

    source: dict[str, Any] = {}
    for child in root:
        text = (child.text or "").strip()
        existing = source.get(child.tag)
        if existing is None:
            source[child.tag] = text
        elif isinstance(existing, list):
            existing.append(text)
        else:
            source[child.tag] = [existing, text]
    return source


def _decode_form(raw: bytes, content_type: str) -> Mapping[str, Any]:
    return parse_form_data(raw, content_type)


JSON = BodyFormat("json", _decode_json)
XML = BodyFormat("xml", _decode_xml)
FORM = BodyFormat("form", _decode_form)

FORMATS: dict[str, BodyFormat] = {
    "application/json": JSON,
    "application/xml": XML,
    "text/xml": XML,
    "application/x-www-form-urlencoded": FORM,
    "multipart/form-data": FORM,
}


def resolve_format(content_type: str | None) -> BodyFormat:
    """Select the ``BodyFormat`` for a Content-Type header value.

    Raises ``UnsupportedContentType`` for a missing or unknown media type.
    """
    kind = media_type(content_type)
    fmt = FORMATS.get(kind)
    if fmt is not None:
        return fmt
    if kind.endswith("+json"):
        return JSON
    if kind.endswith("+xml"):
        return XML
    raise UnsupportedContentType(content_type or "")


def decode[T](content_type: str | None, raw: bytes, target: type[T]) -> T:
    """Decode *raw* according to *content_type* into an instance of *target*.

    Raises:
        UnsupportedContentType: no decoder for the media type.
        MalformedBody: the payload does not parse, a required field is
            missing, or a value cannot be coerced to its field type.
    """
    fmt = resolve_format(content_type)
    source = fmt.decode(raw, content_type or "")
    return bind(target, source, tag=fmt.tag, content_type=media_type(content_type))


def bind[T](
    target: type[T],
    source: Mapping[str, Any],
    *,
    tag: str,
    content_type: str = "",
) -> T:
    """Populate a *target* dataclass from a decoded *source* mapping.

    Each field is looked up under ``field.metadata[tag]`` (or its name).
    Fields absent from *source* take their default; a missing field with
    no default is a ``MalformedBody``.
    """
    if not (isinstance(target, type) and dataclasses.is_dataclass(target)):
        msg = f"Bind target must be a dataclass type, got {target!r}"
        raise TypeError(msg)

    hints = typing.get_type_hints(target)
    values: dict[str, Any] = {}

    for f in dataclasses.fields(target):
        if not f.init:
            continue
        key = f.metadata.get(tag, f.name)
        annotation = hints.get(f.name, str)
        raw = _lookup(source, key, annotation)

        if raw is _MISSING:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise MalformedBody(content_type or tag, f"missing required field {key!r}")
            continue

        try:
            values[f.name] = _coerce(raw, annotation)
        except (TypeError, ValueError) as exc:
            raise MalformedBody(content_type or tag, f"invalid value for {key!r}: {exc}") from exc

    return target(**values)


def _lookup(source: Mapping[str, Any], key: str, annotation: Any) -> Any:
    """Fetch *key* from *source*, honouring multi-value mappings and files."""
    base = _unwrap_optional(annotation)

    if isinstance(source, FormData) and base is UploadFile:
        return source.files.get(key, _MISSING)

    if key not in source:
        return _MISSING

    if isinstance(source, MultiValueMapping) and typing.get_origin(base) is list:
        return source.get_list(key)
    return source[key]


def _unwrap_optional(annotation: Any) -> Any:
    """``X | None`` -> ``X``; anything else is returned unchanged."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _coerce(value: Any, annotation: Any) -> Any:
    """Convert *value* to *annotation*; raises ``ValueError``/``TypeError``."""
    if value is None:
        return None

    target = _unwrap_optional(annotation)

    if typing.get_origin(target) is list:
        (item_type,) = typing.get_args(target) or (Any,)
        items = value if isinstance(value, list) else [value]
        return [_coerce(item, item_type) for item in items]

    if target is str:
        if isinstance(value, (dict, list)):
            raise TypeError(f"expected a string, got {type(value).__name__}")
        return value if isinstance(value, str) else str(value)

    if target is bool:
        if isinstance(value, bool):
            return value
        if not isinstance(value, str):
            raise TypeError(f"expected bool, got {type(value).__name__}")
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"not a boolean: {value!r}")

    if target is int:
        if isinstance(value, bool):
            raise TypeError("expected int, got bool")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"not an integer: {value!r}")
            return int(value)
        if not isinstance(value, (int, str)):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return int(value)

    if target is float:
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise TypeError(f"expected float, got {type(value).__name__}")
        return float(value)

    return value
