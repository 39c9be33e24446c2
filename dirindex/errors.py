"""
Directory Index Errors
======================
Error taxonomy shared by every directory index strategy.

"Not found" is never an error: ``get`` returns ``None`` and ``delete`` of a
missing id is a no-op.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union


class DirectoryIndexError(Exception):
    """Base class for all directory index errors."""


class ConfigurationError(DirectoryIndexError, ValueError):
    """Raised when an index or its settings cannot be constructed."""


class InvalidIdError(DirectoryIndexError, ValueError):
    """Raised when an identifier fails validation.

    Never accompanied by a filesystem side effect.
    """

    def __init__(self, message: str, id: object = None):
        super().__init__(message)
        self.id = id


class StorageError(DirectoryIndexError, OSError):
    """Raised when the underlying filesystem operation fails."""

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        failures: Optional[List[Tuple[Path, BaseException]]] = None,
    ):
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.failures = list(failures or [])

    def __str__(self) -> str:
        return self.args[0] if self.args else super().__str__()
