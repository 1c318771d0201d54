"""The request query string as a multi-value mapping."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs

_TRUTHY = frozenset({"true", "1", "yes", "on"})


class QueryParams(Mapping[str, str]):
    """Parsed query string of a request.

    ``/hello?name=Lev&tag=a&tag=b``::

        query["name"]          # "Lev"
        query.get("missing")   # None
        query.get_list("tag")  # ["a", "b"]

    Blank values are kept (``?name=`` gives ``""``).
    """

    __slots__ = ("_params", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        raw = query_string.encode("latin-1") if isinstance(query_string, str) else query_string
        self._raw = raw
        self._params = parse_qs(raw.decode("latin-1"), keep_blank_values=True)

    @property
    def raw(self) -> bytes:
        """The query string exactly as received."""
        return self._raw

    def __getitem__(self, key: str) -> str:
        return self._params[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw.decode('latin-1')!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._params.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        return list(self._params.get(key, ()))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """*key* as an int; *default* when missing or not a number."""
        value = self.get(key)
        if value is None or not value.strip().removeprefix("-").isdigit():
            return default
        return int(value)

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        """*key* as a bool: ``true``, ``1``, ``yes`` and ``on`` are True."""
        value = self.get(key)
        return default if value is None else value.strip().lower() in _TRUTHY
