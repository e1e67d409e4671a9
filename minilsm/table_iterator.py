"""Cursor over all entries of an on-disk table."""

from __future__ import annotations

from collections.abc import Iterator

from minilsm.block_iterator import BlockIterator
from minilsm.table import SsTable


class SsTableIterator:
    """Walks a table's blocks in order, one entry at a time."""

    def __init__(self, table: SsTable) -> None:
        self._table = table
        self._blk_idx = 0
        self._blk_iter: BlockIterator | None = None

    @classmethod
    def create_and_seek_to_first(cls, table: SsTable) -> "SsTableIterator":
        iterator = cls(table)
        iterator.seek_to_first()
        return iterator

    @classmethod
    def create_and_seek_to_key(cls, table: SsTable, key: bytes) -> "SsTableIterator":
        iterator = cls(table)
        iterator.seek_to_key(key)
        return iterator

    def seek_to_first(self) -> None:
        self._blk_idx = 0
        if not self._table.block_meta:
            self._blk_iter = None
            return
        self._blk_iter = BlockIterator.create_and_seek_to_first(
            self._table.read_block(0)
        )

    def seek_to_key(self, key: bytes) -> None:
        """Move to the first entry whose key is >= ``key``."""
        if not self._table.block_meta:
            self._blk_idx, self._blk_iter = 0, None
            return
        idx = self._table.find_block_idx(key)
        blk_iter = BlockIterator.create_and_seek_to_key(
            self._table.read_block(idx), key
        )
        if not blk_iter.is_valid():
            idx += 1
            if idx < len(self._table.block_meta):
                blk_iter = BlockIterator.create_and_seek_to_first(
                    self._table.read_block(idx)
                )
        self._blk_idx, self._blk_iter = idx, blk_iter

    def is_valid(self) -> bool:
        return self._blk_iter is not None and self._blk_iter.is_valid()

    def key(self) -> bytes | None:
        return self._blk_iter.key() if self.is_valid() else None

    def value(self) -> bytes | None:
        return self._blk_iter.value() if self.is_valid() else None

    def next(self) -> None:
        if not self.is_valid():
            raise RuntimeError("iterator is not valid")
        self._blk_iter.next()
        if not self._blk_iter.is_valid():
            self._blk_idx += 1
            if self._blk_idx < len(self._table.block_meta):
                self._blk_iter = BlockIterator.create_and_seek_to_first(
                    self._table.read_block(self._blk_idx)
                )

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.is_valid():
            yield self.key(), self.value()
            self.next()