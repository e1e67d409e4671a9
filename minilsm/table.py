"""Sorted string tables on disk: file access, block metadata and block lookup."""

from __future__ import annotations

import bisect
import os
import struct
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from minilsm.block import Block

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U16_MAX = 0xFFFF


class FileObject:
    """A read-only handle on a table file together with its size."""

    def __init__(self, file: BinaryIO, size: int) -> None:
        self.file = file
        self.size = size
        self._lock = threading.Lock()

    @classmethod
    def create(cls, path: str | os.PathLike[str], data: bytes) -> "FileObject":
        """Write ``data`` to ``path``, sync it to disk and open it for reading."""
        path = Path(path)
        with path.open("wb") as out:
            out.write(data)
            out.flush()
            os.fsync(out.fileno())
        file = path.open("rb")
        try:
            size = os.fstat(file.fileno()).st_size
        except OSError:
            file.close()
            raise
        return cls(file, size)

    def read(self, offset: int, length: int) -> bytes:
        """Read exactly ``length`` bytes starting at ``offset``."""
        if offset < 0 or length < 0:
            raise ValueError("offset and length must not be negative")
        with self._lock:
            self.file.seek(offset)
            data = self.file.read(length)
        if len(data) < length:
            raise EOFError(
                f"wanted {length} bytes at offset {offset}, got {len(data)}"
            )
        return data

    def close(self) -> None:
        self.file.close()

    def __enter__(self) -> "FileObject":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class BlockMeta:
    """Where a data block starts and which keys it spans."""

    offset: int
    first_key: bytes
    last_key: bytes


def encode_block_meta(metas: list[BlockMeta]) -> bytes:
    """Serialise block metadata.

    Each entry is ``offset (u32) | first_key_len (u16) | first_key |
    last_key_len (u16) | last_key``, little-endian.
    """
    parts: list[bytes] = []
    for meta in metas:
        if len(meta.first_key) > _U16_MAX or len(meta.last_key) > _U16_MAX:
            raise ValueError("block meta keys must fit in 65535 bytes")
        parts.append(_U32.pack(meta.offset))
        parts.append(_U16.pack(len(meta.first_key)))
        parts.append(bytes(meta.first_key))
        parts.append(_U16.pack(len(meta.last_key)))
        parts.append(bytes(meta.last_key))
    return b"".join(parts)


def _take(data: bytes, pos: int, length: int, what: str) -> tuple[bytes, int]:
    end = pos + length
    if end > len(data):
        raise ValueError(f"failed to read {what}: unexpected end of data")
    return data[pos:end], end


def decode_block_meta(data: bytes) -> list[BlockMeta]:
    """Parse the output of :func:`encode_block_meta`."""
    data = bytes(data)
    metas: list[BlockMeta] = []
    pos = 0
    while pos < len(data):
        raw, pos = _take(data, pos, _U32.size, "offset")
        (offset,) = _U32.unpack(raw)
        raw, pos = _take(data, pos, _U16.size, "first key length")
        (first_len,) = _U16.unpack(raw)
        first_key, pos = _take(data, pos, first_len, "first key")
        raw, pos = _take(data, pos, _U16.size, "last key length")
        (last_len,) = _U16.unpack(raw)
        last_key, pos = _take(data, pos, last_len, "last key")
        metas.append(BlockMeta(offset, first_key, last_key))
    return metas


@dataclass
class SsTable:
    """An immutable on-disk table made of data blocks and their metadata."""

    file: FileObject
    block_meta: list[BlockMeta]
    block_meta_offset: int
    id: int
    first_key: bytes
    last_key: bytes

    def read_block(self, idx: int) -> Block:
        """Load and decode the data block at position ``idx``."""
        start = self.block_meta[idx].offset
        if idx + 1 < len(self.block_meta):
            end = self.block_meta[idx + 1].offset
        else:
            end = self.block_meta_offset
        return Block.decode(self.file.read(start, end - start))

    def find_block_idx(self, key: bytes) -> int:
        """Index of the block that may contain ``key``."""
        first_keys = [meta.first_key for meta in self.block_meta]
        return max(bisect.bisect_right(first_keys, bytes(key)) - 1, 0)