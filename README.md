# minilsm

A small log-structured merge-tree (LSM) storage engine for learning and
experimentation. Keys and values are byte strings.

## What is in it

- `minilsm.memtable` — `MemTable`, an ordered in-memory map. `get` returns
  the stored value, or `None` for a key that was never put. `scan(lower,
  upper)` returns a `BoundedMemTableIterator` over keys in `[lower, upper)`;
  `None` leaves a side open.
- `minilsm.storage` — `LsmStorage`, configured with `LsmStorageOptions(
  target_sst_size=...)`. Writes go into the active memtable; once its
  approximate size reaches `target_sst_size` it is frozen into the list of
  immutable memtables (`force_freeze_memtable` does this on demand). `get`
  looks in the active memtable first, then the immutable ones from newest to
  oldest. `delete` writes an empty value, and `get` then returns `None`.
  `scan(lower, upper)` returns an `LsmIterator`.
- `minilsm.merge_iterator` — `MergeIterator` merges sorted iterators, where
  the first one holds the newest data; it yields only the newest version of
  each key and leaves out keys whose newest value is empty. `LsmIterator`
  wraps it.
- `minilsm.block` — `Block` (with `encode` / `Block.decode`) and
  `BlockBuilder`. A block holds entries `key_len (u16) | key | value_len (u16)
  | value`, followed by one 16-bit offset per entry and the entry count, all
  little-endian. `BlockBuilder.add` returns `False` when the block is full;
  the first entry is always accepted.
- `minilsm.block_iterator` — `BlockIterator`, created with
  `create_and_seek_to_first` or `create_and_seek_to_key` (first key `>=` the
  target).
- `minilsm.table` — `FileObject`, `BlockMeta`, `encode_block_meta`,
  `decode_block_meta` and `SsTable` (`read_block`, `find_block_idx`).
- `minilsm.table_builder` — `SsTableBuilder`, which packs sorted pairs into
  blocks and writes a table file laid out as data blocks, block metadata and
  a trailing `u32` metadata offset.
- `minilsm.table_iterator` — `SsTableIterator` over every entry of an
  `SsTable`.

Every iterator has `is_valid`, `key`, `value` and `next`, and can also be
used in a `for` loop, which yields `(key, value)` pairs.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from minilsm.storage import LsmStorage, LsmStorageOptions

store = LsmStorage(LsmStorageOptions(target_sst_size=1024))
store.put(b"a", b"1")
store.put(b"b", b"2")
store.delete(b"a")
print(store.get(b"a"))            # None
print(list(store.scan(None, None)))  # [(b"b", b"2")]
```

Building and reading a block:

```python
from minilsm.block import BlockBuilder
from minilsm.block_iterator import BlockIterator

builder = BlockBuilder(4096)
builder.add(b"apple", b"fruit")
builder.add(b"banana", b"yellow")
block = builder.build()

it = BlockIterator.create_and_seek_to_key(block, b"b")
print(it.key(), it.value())       # b"banana" b"yellow"
```

Writing and reading a table file:

```python
from minilsm.table_builder import SsTableBuilder
from minilsm.table_iterator import SsTableIterator

builder = SsTableBuilder(64)
for i in range(10):
    builder.add(b"key%02d" % i, b"value%d" % i)
table = builder.build(1, "example.sst")

for key, value in SsTableIterator.create_and_seek_to_key(table, b"key05"):
    print(key, value)
table.file.close()
```

## Command

```
minilsm-demo
```

puts a key into a memtable, reads it back, overwrites it and reads it again,
printing what it finds each time.

## What it does not do

`LsmStorage` keeps everything in memory. Frozen memtables are never flushed
to table files, so data does not survive the process, and reads and scans
never consult an `SsTable`. There is no write-ahead log, no compaction, no
block cache and no way to reopen an existing table file; tables can only be
read through the `SsTable` that `SsTableBuilder.build` returns.