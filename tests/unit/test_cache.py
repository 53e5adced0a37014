"""Unit tests for the immutable cache."""

import dataclasses

import pytest

from httpserve.domain.cache import Cache, CacheEntry


def _entry(path: str, body: bytes, content_type: str = "text/plain") -> CacheEntry:
    return CacheEntry(path=path, body=body, content_type=content_type)


def test_lookup_returns_entry_for_exact_key():
    entry = _entry("/a.txt", b"alpha")
    cache = Cache({"/a.txt": entry})

    assert cache.lookup("/a.txt") is entry
    assert cache.lookup("/b.txt") is None


def test_lookup_is_case_sensitive():
    cache = Cache({"/Readme.txt": _entry("/Readme.txt", b"r")})

    assert cache.lookup("/readme.txt") is None


def test_repeated_lookups_return_the_same_object():
    cache = Cache({"/a.txt": _entry("/a.txt", b"alpha")})

    assert cache.lookup("/a.txt") is cache.lookup("/a.txt")


def test_cache_rejects_mutation():
    cache = Cache({"/a.txt": _entry("/a.txt", b"alpha")})

    with pytest.raises(TypeError):
        cache["/b.txt"] = _entry("/b.txt", b"beta")  # type: ignore[index]
    with pytest.raises(AttributeError):
        cache.extra = {}  # type: ignore[attr-defined]


def test_cache_is_detached_from_source_mapping():
    source = {"/a.txt": _entry("/a.txt", b"alpha")}
    cache = Cache(source)

    source["/b.txt"] = _entry("/b.txt", b"beta")

    assert "/b.txt" not in cache
    assert len(cache) == 1


def test_entry_is_frozen():
    entry = _entry("/a.txt", b"alpha")

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.body = b"changed"  # type: ignore[misc]


def test_total_bytes_and_size():
    cache = Cache(
        {
            "/a.txt": _entry("/a.txt", b"alpha"),
            "/empty.css": _entry("/empty.css", b"", "text/css"),
        }
    )

    assert cache.lookup("/a.txt").size == 5
    assert cache.lookup("/empty.css").size == 0
    assert cache.total_bytes == 5


def test_container_protocol():
    cache = Cache({"/a.txt": _entry("/a.txt", b"a"), "/b.txt": _entry("/b.txt", b"b")})

    assert "/a.txt" in cache
    assert sorted(cache) == ["/a.txt", "/b.txt"]
    assert len(cache) == 2
    assert repr(cache) == "Cache(entries=2, total_bytes=2)"
