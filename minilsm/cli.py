"""Small demonstration of memtable writes and lookups."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from minilsm.memtable import MemTable


def _report(memtable: MemTable, key: bytes) -> None:
    value = memtable.get(key)
    if value is not None:
        print("Find element:", value.decode())
    else:
        print("Element not found")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="minilsm", description="Write and read back a key in a memtable."
    )
    parser.parse_args(argv)

    memtable = MemTable(0)
    memtable.put(b"3", b"312")
    _report(memtable, b"3")
    memtable.put(b"3", b"123")
    _report(memtable, b"3")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())