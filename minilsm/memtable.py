"""In-memory sorted table of key-value pairs with bounded range iteration."""

from __future__ import annotations

from collections.abc import Iterator

from sortedcontainers import SortedDict


class MemTable:
    """Sorted map from byte keys to byte values.

    An empty value marks a deleted key.
    """

    def __init__(self, id: int) -> None:
        self.id = id
        self.approximate_size = 0
        self._map: SortedDict = SortedDict()

    def put(self, key: bytes, value: bytes) -> None:
        key, value = bytes(key), bytes(value)
        self._map[key] = value
        self.approximate_size += len(key) + len(value)

    def get(self, key: bytes) -> bytes | None:
        """Return the stored value, or None when the key was never put."""
        return self._map.get(bytes(key))

    def scan(self, lower: bytes | None, upper: bytes | None) -> "BoundedMemTableIterator":
        """Iterate keys in ``[lower, upper)``; None leaves that side open."""
        return BoundedMemTableIterator(self, lower, upper)


class BoundedMemTableIterator:
    """Cursor over a memtable starting at ``start`` and stopping before ``upper``.

    Values are read from the table on access, so updates made to the current
    key while iterating are visible.
    """

    def __init__(
        self, memtable: MemTable, start: bytes | None, upper: bytes | None
    ) -> None:
        self._map = memtable._map
        self._upper = None if upper is None else bytes(upper)
        index = 0 if start is None else self._map.bisect_left(bytes(start))
        self._key = self._key_at(index)

    def _key_at(self, index: int) -> bytes | None:
        if index >= len(self._map):
            return None
        key = self._map.peekitem(index)[0]
        if self._upper is not None and key >= self._upper:
            return None
        return key

    def is_valid(self) -> bool:
        return self._key is not None

    def key(self) -> bytes | None:
        return self._key

    def value(self) -> bytes | None:
        if self._key is None:
            return None
        return self._map[self._key]

    def next(self) -> None:
        if self._key is None:
            raise RuntimeError("iterator is not valid")
        self._key = self._key_at(self._map.bisect_right(self._key))

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.is_valid():
            yield self.key(), self.value()
            self.next()