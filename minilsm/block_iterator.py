"""Cursor over the entries of a single block."""

from __future__ import annotations

import bisect
import struct
from collections.abc import Iterator

from minilsm.block import SIZEOF_U16, Block

_U16 = struct.Struct("<H")


class BlockIterator:
    """Positions over a block's entries in key order."""

    def __init__(self, block: Block) -> None:
        self._block = block
        self._key: bytes | None = b""
        self._value_range = (0, 0)
        self._idx = 0

    @classmethod
    def create_and_seek_to_first(cls, block: Block) -> "BlockIterator":
        iterator = cls(block)
        iterator.seek_to_first()
        return iterator

    @classmethod
    def create_and_seek_to_key(cls, block: Block, key: bytes) -> "BlockIterator":
        iterator = cls(block)
        iterator.seek_to_key(key)
        return iterator

    def seek_to_first(self) -> None:
        self._seek_to(0)

    def seek_to_key(self, key: bytes) -> None:
        """Move to the first entry whose key is >= ``key``."""
        idx = bisect.bisect_left(
            range(len(self._block.offsets)), bytes(key), key=self._key_at
        )
        self._seek_to(idx)

    def is_valid(self) -> bool:
        return bool(self._key)

    def key(self) -> bytes:
        if not self.is_valid():
            raise RuntimeError("invalid iterator: key is empty")
        return self._key

    def value(self) -> bytes:
        if not self.is_valid():
            raise RuntimeError("invalid iterator: key is empty")
        start, end = self._value_range
        return bytes(self._block.data[start:end])

    def next(self) -> None:
        """Step to the following entry; past the last one the iterator turns invalid."""
        if not self.is_valid():
            raise RuntimeError("iterator is not valid")
        self._idx += 1
        self._seek_to(self._idx)

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.is_valid():
            yield self.key(), self.value()
            self.next()

    def _key_at(self, idx: int) -> bytes:
        offset = self._block.offsets[idx]
        (key_len,) = _U16.unpack_from(self._block.data, offset)
        start = offset + SIZEOF_U16
        return bytes(self._block.data[start:start + key_len])

    def _seek_to(self, idx: int) -> None:
        if idx >= len(self._block.offsets):
            self._key = None
            self._value_range = (0, 0)
            return
        offset = self._block.offsets[idx]
        data = self._block.data
        (key_len,) = _U16.unpack_from(data, offset)
        key_start = offset + SIZEOF_U16
        self._key = bytes(data[key_start:key_start + key_len])
        (value_len,) = _U16.unpack_from(data, key_start + key_len)
        value_start = key_start + key_len + SIZEOF_U16
        self._value_range = (value_start, value_start + value_len)
        self._idx = idx