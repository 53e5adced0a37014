"""Load a directory tree into an immutable in-memory cache."""

import logging
import os
import time
from pathlib import Path, PurePosixPath
from typing import Union

from httpserve.bootstrap.errors import LoadError
from httpserve.domain.cache import Cache, CacheEntry
from httpserve.domain.content_types import content_type_for
from httpserve.domain.correlation_id import get_logger
from httpserve.domain.paths import url_path_for

LOADER_LOGGER = get_logger("bootstrap.loader")


def load_cache(root: Union[str, os.PathLike]) -> Cache:
    """Read every regular file under ``root`` and return the populated cache.

    Symbolic links are followed. Any entry that cannot be read raises
    ``LoadError``, and so do dangling links and directory links that point
    back at an ancestor. Nothing is served from a partially loaded tree.
    """
    root_path = Path(root)
    if not root_path.exists():
        raise LoadError(f"Directory {root_path} does not exist")
    if not root_path.is_dir():
        raise LoadError(f"{root_path} is not a directory")

    started = time.monotonic()
    entries: dict[str, CacheEntry] = {}
    _load_directory(root_path, PurePosixPath(), entries, frozenset())
    cache = Cache(entries)

    LOADER_LOGGER.info(
        "Directory loaded into memory",
        extra={
            "event": "cache_loaded",
            "directory": root_path.as_posix(),
            "entries": len(cache),
            "total_bytes": cache.total_bytes,
            "duration_ms": round((time.monotonic() - started) * 1000, 3),
        },
    )
    return cache


def _load_directory(
    directory: Path,
    relative: PurePosixPath,
    entries: dict[str, CacheEntry],
    ancestors: frozenset[str],
) -> None:
    real_path = os.path.realpath(directory)
    if real_path in ancestors:
        raise LoadError(f"Symbolic link cycle detected at {directory}")
    ancestors = ancestors | {real_path}

    try:
        with os.scandir(directory) as iterator:
            children = sorted(iterator, key=lambda child: child.name)
    except OSError as error:
        raise LoadError(f"Unable to read directory {directory}: {error}") from error

    for child in children:
        child_path = Path(child.path)
        child_relative = relative / child.name
        try:
            is_dir = child.is_dir()
            is_file = child.is_file()
        except OSError as error:
            raise LoadError(f"Unable to stat {child_path}: {error}") from error

        if is_dir:
            _load_directory(child_path, child_relative, entries, ancestors)
        elif is_file:
            entry = _load_file(child_path, child_relative)
            entries[entry.path] = entry
        elif child.is_symlink():
            raise LoadError(f"Dangling symbolic link {child_path}")
        else:
            LOADER_LOGGER.warning(
                "Skipping special file",
                extra={"event": "cache_entry_skipped", "path": child_path.as_posix()},
            )


def _load_file(file_path: Path, relative: PurePosixPath) -> CacheEntry:
    try:
        body = file_path.read_bytes()
    except MemoryError as error:
        raise LoadError(f"Out of memory while reading {file_path}") from error
    except OSError as error:
        raise LoadError(f"Failed to read file {file_path}: {error}") from error

    entry = CacheEntry(
        path=url_path_for(relative),
        body=body,
        content_type=content_type_for(relative.name),
    )
    if LOADER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        LOADER_LOGGER.debug(
            "Loaded file",
            extra={
                "event": "cache_entry_loaded",
                "path": entry.path,
                "bytes": entry.size,
                "content_type": entry.content_type,
            },
        )
    return entry
