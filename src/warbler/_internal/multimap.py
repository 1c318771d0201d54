"""Read-only view shared by ``Headers``, ``QueryParams`` and ``FormData``.

``bind()`` fills list-typed dataclass fields from any of them through
``get_list``.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """String keys, each holding one or more string values.

    Indexing and ``get`` give the first value; ``get_list`` gives them all.
    """

    def get_list(self, key: str) -> list[str]: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
