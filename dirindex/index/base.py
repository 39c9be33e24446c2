"""
Directory Index Contract
========================
Maps opaque string identifiers to directories below a fixed base directory.

Concrete strategies decide how an id becomes a relative path. The contract
guarantees, for every strategy:

- ids are validated before any filesystem call
- resolved paths always lie strictly inside ``base_dir``
- ``add`` and ``delete`` are idempotent
- ``iterate`` returns a fresh, lazily taken snapshot on every call
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from loguru import logger

from dirindex.index.iterator import MappingIterator
from dirindex.tracing import init_tracing, safe_set_current_span_attributes
from dirindex.utils.filesystem import canonical_base_dir, join_within, validate_id


@dataclass(frozen=True)
class Mapping:
    """Association between one identifier and its directory."""
    id: str
    path: Path

    def to_dict(self) -> Dict[str, str]:
        """Record shape stored by a consuming record store."""
        return {"_id": self.id, "_path": str(self.path)}


class DirectoryIndex(ABC):
    """Base class for all directory index strategies."""

    def __init__(self, base_dir: Union[str, "os.PathLike[str]"]):
        """
        Args:
            base_dir: Root for every mapped directory. Stored in absolute,
                canonical form; it does not need to exist yet.

        Raises:
            ConfigurationError: if ``base_dir`` is empty or not a string/path.
        """
        self._base_dir = canonical_base_dir(base_dir)
        self._tracer = init_tracing()
        logger.debug(f"Initialized {type(self).__name__} at {self._base_dir}")

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_dir={str(self._base_dir)!r})"

    @abstractmethod
    def get(self, id: str) -> Optional[Mapping]:
        """
        Look up the directory for ``id`` without touching the filesystem.

        Returns:
            The Mapping if a directory exists for ``id``, else None

        Raises:
            InvalidIdError: if ``id`` is invalid or would escape ``base_dir``
        """

    @abstractmethod
    def add(self, id: str) -> Mapping:
        """
        Return the directory for ``id``, creating it (and parents) if needed.

        Calling ``add`` again for the same id returns the same path.

        Raises:
            InvalidIdError: if ``id`` is invalid or would escape ``base_dir``
            StorageError: if the directory cannot be created
        """

    @abstractmethod
    def delete(self, id: str) -> None:
        """
        Remove the directory for ``id`` and all of its contents.

        Deleting an id that has no directory is a no-op.

        Raises:
            InvalidIdError: if ``id`` is invalid or would escape ``base_dir``
            StorageError: if removal fails
        """

    @abstractmethod
    def delete_all(self) -> None:
        """
        Remove every entry below ``base_dir`` while keeping ``base_dir``.

        Raises:
            StorageError: if any entry could not be removed; entries already
                removed stay removed
        """

    @abstractmethod
    def iterate(self) -> MappingIterator:
        """Return a new lazy iterator over a fresh snapshot of all mappings."""

    @abstractmethod
    def _to_relative(self, id: str) -> str:
        """Strategy hook: translate a validated id into a path relative to ``base_dir``."""

    def _check_id(self, id: object) -> str:
        return validate_id(id)

    def _resolve(self, id: object) -> Path:
        """Validate ``id`` and return its absolute path inside ``base_dir``."""
        checked = self._check_id(id)
        return join_within(self._base_dir, self._to_relative(checked), id=checked)

    @contextmanager
    def _span(self, operation: str, id: object = None) -> Iterator[None]:
        with self._tracer.start_as_current_span(f"directory_index.{operation}"):
            safe_set_current_span_attributes(
                {
                    "directory_index.strategy": type(self).__name__,
                    "directory_index.id": id,
                }
            )
            yield

    # Convenience helpers built on the contract operations

    def get_or_add(self, id: str) -> Mapping:
        mapping = self.get(id)
        return mapping if mapping is not None else self.add(id)

    def __iter__(self) -> MappingIterator:
        return self.iterate()

    def each(self, callback: Callable[[Mapping], Any]) -> int:
        """Call ``callback`` for every mapping; returns the number visited."""
        n = 0
        for mapping in self.iterate():
            callback(mapping)
            n += 1
        return n

    def count(self) -> int:
        return sum(1 for _ in self.iterate())

    def first(self) -> Optional[Mapping]:
        return next(self.iterate(), None)

    def to_list(self) -> List[Mapping]:
        return list(self.iterate())
