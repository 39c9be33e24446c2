"""Directory index contract and strategies."""

from .base import DirectoryIndex, Mapping
from .iterator import MappingIterator
from .simple import SimpleDirectoryIndex

__all__ = [
    "DirectoryIndex",
    "Mapping",
    "MappingIterator",
    "SimpleDirectoryIndex",
]
