"""Merging of several sorted iterators into one newest-wins view."""

from __future__ import annotations

import heapq
from collections.abc import Iterator, Sequence
from typing import Protocol


class StorageIterator(Protocol):
    """What the merge needs from each of its sources."""

    def is_valid(self) -> bool: ...

    def key(self) -> bytes | None: ...

    def value(self) -> bytes | None: ...

    def next(self) -> None: ...


class MergeIterator:
    """Merges sorted iterators; ``iters[0]`` holds the newest data.

    For each key only the newest version is produced, and keys whose newest
    version is an empty value (a deletion) are left out.
    """

    def __init__(self, iters: Sequence[StorageIterator]) -> None:
        self._iters = list(iters)
        self._heap: list[tuple[bytes, int, StorageIterator]] = [
            (it.key(), index, it)
            for index, it in enumerate(self._iters)
            if it.is_valid()
        ]
        heapq.heapify(self._heap)
        self._current: tuple[bytes, bytes] | None = None
        self._last_key: bytes | None = None
        self._advance()

    def _advance(self) -> None:
        self._current = None
        while self._heap:
            key, index, it = heapq.heappop(self._heap)
            value = it.value()
            it.next()
            if it.is_valid():
                heapq.heappush(self._heap, (it.key(), index, it))

            if self._last_key is not None and key == self._last_key:
                continue  # an older version of a key already handled
            self._last_key = key
            if not value:
                continue  # deleted
            self._current = (key, value)
            return

    def is_valid(self) -> bool:
        return self._current is not None

    def key(self) -> bytes | None:
        return None if self._current is None else self._current[0]

    def value(self) -> bytes | None:
        return None if self._current is None else self._current[1]

    def next(self) -> None:
        if self._current is None:
            raise RuntimeError("iterator not valid")
        self._advance()

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.is_valid():
            yield self.key(), self.value()
            self.next()


class LsmIterator:
    """The iterator handed out by the storage engine's scans."""

    def __init__(self, inner: MergeIterator) -> None:
        self._inner = inner

    def is_valid(self) -> bool:
        return self._inner.is_valid()

    def key(self) -> bytes | None:
        return self._inner.key()

    def value(self) -> bytes | None:
        return self._inner.value()

    def next(self) -> None:
        self._inner.next()

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.is_valid():
            yield self.key(), self.value()
            self.next()