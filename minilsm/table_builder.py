"""Assembly of sorted key-value pairs into an on-disk table."""

from __future__ import annotations

import os
import struct

from minilsm.block import BlockBuilder
from minilsm.table import BlockMeta, FileObject, SsTable, encode_block_meta

_U32 = struct.Struct("<I")


class SsTableBuilder:
    """Builds a table file laid out as::

        | data block | ... | data block | block metadata | meta offset (u32) |
    """

    def __init__(self, block_size: int) -> None:
        self.block_size = block_size
        self._builder = BlockBuilder(block_size)
        self._first_key = b""
        self._last_key = b""
        self._data = bytearray()
        self._meta: list[BlockMeta] = []

    def add(self, key: bytes, value: bytes) -> None:
        """Append a pair; keys must arrive in ascending order."""
        key, value = bytes(key), bytes(value)
        if not self._first_key:
            self._first_key = key
        if self._builder.add(key, value):
            self._last_key = key
            return

        self._finish_block()
        if not self._builder.add(key, value):
            raise RuntimeError("failed adding a key-value pair to a fresh block")
        self._first_key = key
        self._last_key = key

    def _finish_block(self) -> None:
        if self._builder.is_empty():
            return
        finished, self._builder = self._builder, BlockBuilder(self.block_size)
        self._meta.append(
            BlockMeta(len(self._data), self._first_key, self._last_key)
        )
        self._data += finished.build().encode()
        self._first_key = b""
        self._last_key = b""

    def estimated_size(self) -> int:
        """Bytes taken by the blocks finished so far."""
        return len(self._data)

    def build(self, id: int, path: str | os.PathLike[str]) -> SsTable:
        """Write the table to ``path`` and return it opened for reading."""
        self._finish_block()
        if not self._meta:
            raise ValueError("cannot build a table with no entries")
        meta_offset = len(self._data)
        payload = b"".join(
            (bytes(self._data), encode_block_meta(self._meta), _U32.pack(meta_offset))
        )
        file = FileObject.create(path, payload)
        return SsTable(
            file=file,
            block_meta=list(self._meta),
            block_meta_offset=meta_offset,
            id=id,
            first_key=bytes(self._meta[0].first_key),
            last_key=bytes(self._meta[-1].last_key),
        )