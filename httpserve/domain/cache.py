"""Immutable in-memory file cache."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One loaded file: its URL path, full content and Content-Type."""

    path: str
    body: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.body)


class Cache:
    """Read-only mapping from normalized URL path to ``CacheEntry``.

    Built once by the loader and never mutated afterwards, so worker threads
    share it without any locking.
    """

    __slots__ = ("_entries", "_total_bytes")

    def __init__(self, entries: Mapping[str, CacheEntry]) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._total_bytes = sum(entry.size for entry in self._entries.values())

    def lookup(self, url_path: str) -> Optional[CacheEntry]:
        """Return the entry stored under ``url_path`` or None."""
        return self._entries.get(url_path)

    @property
    def total_bytes(self) -> int:
        return self._total_bytes

    def __contains__(self, url_path: object) -> bool:
        return url_path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Cache(entries={len(self)}, total_bytes={self._total_bytes})"
