"""
dirindex
========
Map opaque string identifiers to directories below a base directory.

    >>> from dirindex import SimpleDirectoryIndex
    >>> index = SimpleDirectoryIndex("/var/lib/records")
    >>> mapping = index.get("abc") or index.add("abc")
"""

from .errors import (
    ConfigurationError,
    DirectoryIndexError,
    InvalidIdError,
    StorageError,
)
from .index import DirectoryIndex, Mapping, MappingIterator, SimpleDirectoryIndex

__version__ = "0.1.0"

__all__ = [
    # Contract
    "DirectoryIndex",
    "Mapping",
    "MappingIterator",
    # Strategies
    "SimpleDirectoryIndex",
    # Errors
    "DirectoryIndexError",
    "ConfigurationError",
    "InvalidIdError",
    "StorageError",
]
