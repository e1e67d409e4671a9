"""The storage engine: a mutable memtable plus frozen immutable ones."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from minilsm.memtable import MemTable
from minilsm.merge_iterator import LsmIterator, MergeIterator


@dataclass
class LsmStorageOptions:
    """Tuning knobs of the engine."""

    # SST size in bytes, also the approximate memtable capacity limit
    target_sst_size: int


@dataclass
class LsmStorageState:
    """The tables that currently make up the tree."""

    memtable: MemTable = field(default_factory=lambda: MemTable(0))
    imm_memtables: list[MemTable] = field(default_factory=list)
    l0_sstables: list[int] = field(default_factory=list)
    id: int = 0


class LsmStorage:
    """Key-value store; writes go to the memtable, which is frozen when full."""

    def __init__(self, options: LsmStorageOptions) -> None:
        self.options = options
        self.state = LsmStorageState()
        self._lock = threading.RLock()

    def get(self, key: bytes) -> bytes | None:
        """Return the newest value for ``key``, or None if absent or deleted."""
        with self._lock:
            tables = [self.state.memtable, *reversed(self.state.imm_memtables)]
            for table in tables:
                value = table.get(key)
                if value is not None:
                    return value or None
            return None

    def put(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self.state.memtable.put(key, value)
            self._try_freeze()

    def delete(self, key: bytes) -> None:
        """Mark ``key`` deleted by writing an empty value."""
        with self._lock:
            self.state.memtable.put(key, b"")

    def _try_freeze(self) -> None:
        if self.state.memtable.approximate_size >= self.options.target_sst_size:
            self.force_freeze_memtable()

    def force_freeze_memtable(self) -> None:
        """Move the current memtable to the immutable list and start a new one."""
        with self._lock:
            current = self.state.memtable
            self.state.imm_memtables.append(current)
            self.state.memtable = MemTable(current.id + 1)

    def scan(self, lower: bytes | None, upper: bytes | None) -> LsmIterator:
        """Iterate live keys in ``[lower, upper)``; None leaves a side open."""
        with self._lock:
            tables = [self.state.memtable, *reversed(self.state.imm_memtables)]
            iters = [table.scan(lower, upper) for table in tables]
        return LsmIterator(MergeIterator(iters))