"""Lazy, snapshot-based iteration over directory index entries."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Callable, Deque, Iterator, List, Optional

if TYPE_CHECKING:
    from dirindex.index.base import Mapping


class MappingIterator(Iterator["Mapping"]):
    """Iterator over one snapshot of an index.

    The directory listing happens on the first ``next()`` call, not when the
    iterator is created. Entries added after that point are not yielded;
    entries removed after it may still be yielded, so consumers must tolerate
    a ``Mapping`` whose path no longer exists. The iterator is single-use:
    once exhausted it stays exhausted and never re-scans.
    """

    def __init__(self, scan: Callable[[], List["Mapping"]]):
        self._scan: Optional[Callable[[], List["Mapping"]]] = scan
        self._entries: Optional[Deque["Mapping"]] = None

    @property
    def snapshot_taken(self) -> bool:
        return self._entries is not None

    def __iter__(self) -> "MappingIterator":
        return self

    def __next__(self) -> "Mapping":
        if self._entries is None:
            scan, self._scan = self._scan, None
            try:
                self._entries = deque(scan())
            except Exception:
                # A failed snapshot leaves the iterator exhausted
                self._entries = deque()
                raise
        if not self._entries:
            raise StopIteration
        return self._entries.popleft()
