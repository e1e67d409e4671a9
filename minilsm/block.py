"""Sorted key-value blocks, the smallest unit of reading and caching."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

SIZEOF_U16 = 2
_U16 = struct.Struct("<H")
_U16_MAX = 0xFFFF


@dataclass
class Block:
    """A collection of sorted key-value entries plus their offsets.

    Encoded layout::

        | entry #1 | ... | entry #N | offset #1 | ... | offset #N | N (u16) |

    Each entry is ``key_len (u16) | key | value_len (u16) | value``, with all
    integers little-endian.
    """

    data: bytes
    offsets: list[int] = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialise the block: data section, offsets, then the entry count."""
        count = len(self.offsets)
        return b"".join(
            (
                bytes(self.data),
                struct.pack(f"<{count}H", *self.offsets),
                _U16.pack(count),
            )
        )

    @classmethod
    def decode(cls, data: bytes) -> "Block":
        """Rebuild a block from its encoded form."""
        data = bytes(data)
        if len(data) < SIZEOF_U16:
            raise ValueError("block is too short to hold an entry count")
        (count,) = _U16.unpack_from(data, len(data) - SIZEOF_U16)
        offsets_start = len(data) - SIZEOF_U16 - count * SIZEOF_U16
        if offsets_start < 0:
            raise ValueError(
                f"block claims {count} entries but holds only {len(data)} bytes"
            )
        offsets = list(struct.unpack_from(f"<{count}H", data, offsets_start))
        return cls(data[:offsets_start], offsets)


class BlockBuilder:
    """Accumulates sorted key-value pairs into a block of bounded size."""

    def __init__(self, block_size: int) -> None:
        self.block_size = block_size
        self.offsets: list[int] = []
        self.data = bytearray()

    def estimated_size(self) -> int:
        """Size in bytes the block would take once encoded."""
        return SIZEOF_U16 + len(self.offsets) * SIZEOF_U16 + len(self.data)

    def is_empty(self) -> bool:
        return not self.offsets

    def add(self, key: bytes, value: bytes) -> bool:
        """Append an entry; return False when the block is already full.

        The first entry is always accepted, whatever its size.
        """
        if not key:
            raise ValueError("key must not be empty")
        if len(key) > _U16_MAX or len(value) > _U16_MAX:
            raise ValueError("key and value must each fit in 65535 bytes")

        # key_len, val_len and the entry's offset slot
        entry_size = SIZEOF_U16 * 3 + len(key) + len(value)
        if self.estimated_size() + entry_size > self.block_size and not self.is_empty():
            return False

        offset = len(self.data)
        if offset > _U16_MAX:
            raise ValueError("block data exceeds the 16-bit offset range")
        self.offsets.append(offset)
        self.data += _U16.pack(len(key))
        self.data += key
        self.data += _U16.pack(len(value))
        self.data += value
        return True

    def build(self) -> Block:
        """Finish the block; an empty builder cannot produce one."""
        if not self.data:
            raise ValueError("block should not be empty")
        return Block(bytes(self.data), list(self.offsets))