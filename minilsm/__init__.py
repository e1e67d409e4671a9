"""A small log-structured merge-tree storage engine: memtables, merge iterators, blocks and table files."""

__version__ = "0.1.0"