"""Filesystem helpers.

Identifier validation and safe path construction used by every directory
index strategy. All checks are lexical: they run before any filesystem call,
so a rejected id never causes a side effect.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Union

from dirindex.errors import ConfigurationError, InvalidIdError

_SEPARATORS = frozenset(sep for sep in ("/", "\\", os.sep, os.altsep) if sep)


def canonical_base_dir(base_dir: object) -> Path:
    """Return the absolute, symlink-free form of ``base_dir``.

    Raises:
        ConfigurationError: if ``base_dir`` is not a non-empty string or path.
    """
    if isinstance(base_dir, os.PathLike):
        base_dir = os.fspath(base_dir)
    if not isinstance(base_dir, str):
        raise ConfigurationError(f"base_dir must be a string, got {type(base_dir).__name__}")
    if not base_dir.strip():
        raise ConfigurationError("base_dir must be a non-empty string")
    if "\x00" in base_dir:
        raise ConfigurationError("base_dir must not contain NUL bytes")
    return Path(os.path.realpath(base_dir))


def validate_id(id: object) -> str:
    if not isinstance(id, str):
        raise InvalidIdError(f"id must be a string, got {type(id).__name__}", id)
    if not id:
        raise InvalidIdError("id must be a non-empty string", id)
    if "\x00" in id:
        raise InvalidIdError("id must not contain NUL bytes", id)
    try:
        os.fsencode(id)
    except UnicodeError as e:
        raise InvalidIdError(f"id cannot be encoded for the filesystem: {id!r}", id) from e
    return id


def validate_path_segment(id: str) -> str:
    """Check that an already validated ``id`` can be used verbatim as one directory name.

    Notes:
    - Rejects path separators of this and other platforms
    - Rejects the relative segments '.' and '..'
    """
    if any(sep in id for sep in _SEPARATORS):
        raise InvalidIdError(f"id must not contain path separators: {id!r}", id)
    if id in (os.curdir, os.pardir):
        raise InvalidIdError(f"id must not be a relative path segment: {id!r}", id)
    return id


def is_within(base_dir: Path, path: Union[str, Path]) -> bool:
    """True when ``path`` lies strictly below ``base_dir`` after normalization."""
    base = os.path.normpath(str(base_dir))
    candidate = os.path.normpath(str(path))
    if candidate == base:
        return False
    try:
        return os.path.commonpath([base, candidate]) == base
    except ValueError:
        # Different drives, or mixing absolute and relative paths
        return False


def join_within(base_dir: Path, relative: Union[str, Path], id: object = None) -> Path:
    """Join ``relative`` onto ``base_dir`` and refuse anything that escapes it.

    Raises:
        InvalidIdError: if the joined path is not strictly inside ``base_dir``.
    """
    if os.path.isabs(str(relative)):
        raise InvalidIdError(f"path must be relative to base_dir: {relative!r}", id)
    candidate = os.path.normpath(os.path.join(str(base_dir), str(relative)))
    if not is_within(base_dir, candidate):
        raise InvalidIdError(f"path escapes base_dir: {relative!r}", id)
    return Path(candidate)


def remove_tree(path: Union[str, Path], attempts: int = 5) -> None:
    """Remove ``path`` depth-first, tolerating entries removed concurrently.

    Raises:
        OSError: for any failure other than an entry vanishing underneath us.
    """
    for attempt in range(attempts):
        try:
            shutil.rmtree(path)
            return
        except FileNotFoundError:
            if not os.path.lexists(path):
                return
            if attempt == attempts - 1:
                raise
