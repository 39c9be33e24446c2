"""
Directory-Per-Identifier Index
==============================
Reference strategy: every id is used verbatim as the name of one directory
directly below ``base_dir``.

Failure policy:
- ``add`` never rolls back. Intermediate directories it created stay in
  place, and a retry completes the job.
- ``delete`` removes depth-first. A failure part way leaves the directory
  present (and visible to ``get``) and a retry finishes the removal.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple, Union

from loguru import logger

from dirindex.config import INDEX
from dirindex.errors import StorageError
from dirindex.index.base import DirectoryIndex, Mapping
from dirindex.index.iterator import MappingIterator
from dirindex.utils.filesystem import remove_tree, validate_path_segment


class SimpleDirectoryIndex(DirectoryIndex):
    """One directory per identifier, named after the identifier."""

    def __init__(
        self,
        base_dir: Union[str, "os.PathLike[str]"],
        dir_mode: Optional[int] = None,
    ):
        """
        Args:
            base_dir: Root directory for all mappings
            dir_mode: Mode for directories created by ``add``; defaults to
                ``INDEX.DIR_MODE`` (still subject to the umask)
        """
        super().__init__(base_dir)
        self.dir_mode = INDEX.DIR_MODE if dir_mode is None else dir_mode

    def _to_relative(self, id: str) -> str:
        return validate_path_segment(id)

    def get(self, id: str) -> Optional[Mapping]:
        with self._span("get", id):
            path = self._resolve(id)
            if not os.path.isdir(path):
                logger.debug(f"No directory for {id!r} under {self.base_dir}")
                return None
            return Mapping(id=id, path=path)

    def add(self, id: str) -> Mapping:
        with self._span("add", id):
            path = self._resolve(id)
            if os.path.isdir(path):
                return Mapping(id=id, path=path)

            try:
                # exist_ok keeps concurrent creators of the same id from failing
                os.makedirs(path, mode=self.dir_mode, exist_ok=True)
            except OSError as e:
                logger.warning(f"Could not create directory for {id!r} at {path}: {e}")
                raise StorageError(f"Could not create directory {path}: {e}", path) from e

            logger.info(f"Created directory for {id!r}: {path}")
            return Mapping(id=id, path=path)

    def delete(self, id: str) -> None:
        with self._span("delete", id):
            path = self._resolve(id)
            if not os.path.isdir(path):
                logger.debug(f"Nothing to delete for {id!r}")
                return

            try:
                if os.path.islink(path):
                    os.unlink(path)
                else:
                    remove_tree(path)
            except OSError as e:
                if not os.path.lexists(path):
                    # Removed concurrently
                    return
                logger.warning(f"Could not delete directory for {id!r} at {path}: {e}")
                raise StorageError(f"Could not delete directory {path}: {e}", path) from e

            logger.info(f"Deleted directory for {id!r}: {path}")

    def delete_all(self) -> None:
        with self._span("delete_all"):
            try:
                with os.scandir(self.base_dir) as it:
                    entries = [(Path(entry.path), entry.is_dir(follow_symlinks=False)) for entry in it]
            except FileNotFoundError:
                logger.debug(f"{self.base_dir} does not exist, nothing to delete")
                return
            except OSError as e:
                raise StorageError(f"Could not list {self.base_dir}: {e}", self.base_dir) from e

            failures: List[Tuple[Path, BaseException]] = []
            for path, is_dir in entries:
                try:
                    if is_dir:
                        remove_tree(path)
                    else:
                        os.unlink(path)
                except OSError as e:
                    if os.path.lexists(path):
                        logger.warning(f"Could not remove {path}: {e}")
                        failures.append((path, e))

            if failures:
                failed = ", ".join(str(path) for path, _ in failures)
                raise StorageError(
                    f"Could not remove {len(failures)} of {len(entries)} entries under {self.base_dir}: {failed}",
                    self.base_dir,
                    failures,
                ) from failures[0][1]

            logger.info(f"Removed {len(entries)} entries under {self.base_dir}")

    def iterate(self) -> MappingIterator:
        return MappingIterator(self._scan)

    def _scan(self) -> List[Mapping]:
        with self._span("iterate"):
            try:
                with os.scandir(self.base_dir) as entries:
                    mappings = [
                        Mapping(id=entry.name, path=Path(entry.path))
                        for entry in entries
                        if entry.is_dir()
                    ]
            except FileNotFoundError:
                logger.debug(f"{self.base_dir} does not exist, snapshot is empty")
                return []
            except OSError as e:
                raise StorageError(f"Could not list {self.base_dir}: {e}", self.base_dir) from e

            logger.debug(f"Snapshot of {self.base_dir}: {len(mappings)} entries")
            return mappings
