import pytest

from minilsm.memtable import MemTable
from minilsm.merge_iterator import LsmIterator, MergeIterator


def _table(id_, pairs):
    mt = MemTable(id_)
    for key, value in pairs:
        mt.put(key, value)
    return mt


def test_newest_version_wins():
    newest = _table(1, [(b"a", b"new")])
    oldest = _table(0, [(b"a", b"old"), (b"b", b"bee")])
    merged = MergeIterator([newest.scan(None, None), oldest.scan(None, None)])
    assert list(merged) == [(b"a", b"new"), (b"b", b"bee")]


def test_order_of_sources_decides_priority():
    first = _table(0, [(b"k", b"one")])
    second = _table(1, [(b"k", b"two")])
    merged = MergeIterator([second.scan(None, None), first.scan(None, None)])
    assert list(merged) == [(b"k", b"two")]


def test_deletion_hides_older_versions():
    newest = _table(1, [(b"b", b"")])
    oldest = _table(0, [(b"b", b"x"), (b"c", b"y")])
    merged = MergeIterator([newest.scan(None, None), oldest.scan(None, None)])
    assert list(merged) == [(b"c", b"y")]


def test_keys_come_out_sorted_and_unique():
    tables = [
        _table(2, [(b"d", b"1"), (b"a", b"1")]),
        _table(1, [(b"c", b"2"), (b"a", b"2"), (b"e", b"2")]),
        _table(0, [(b"b", b"3"), (b"e", b"3")]),
    ]
    keys = [k for k, _ in MergeIterator([t.scan(None, None) for t in tables])]
    assert keys == sorted(set(keys))
    assert set(keys) == {b"a", b"b", b"c", b"d", b"e"}


def test_bounds_are_respected():
    mt = _table(0, [(b"a", b"1"), (b"b", b"2"), (b"c", b"3"), (b"d", b"4")])
    merged = MergeIterator([mt.scan(b"b", b"d")])
    assert list(merged) == [(b"b", b"2"), (b"c", b"3")]


def test_empty_merge_is_invalid():
    merged = MergeIterator([MemTable(0).scan(None, None)])
    assert merged.is_valid() is False
    assert merged.key() is None
    assert merged.value() is None
    with pytest.raises(RuntimeError):
        merged.next()


def test_next_past_end_raises():
    merged = MergeIterator([_table(0, [(b"a", b"1")]).scan(None, None)])
    assert merged.key() == b"a"
    merged.next()
    assert merged.is_valid() is False
    with pytest.raises(RuntimeError):
        merged.next()


def test_lsm_iterator_forwards_to_inner():
    newest = _table(1, [(b"x", b"10")])
    oldest = _table(0, [(b"w", b"9"), (b"x", b"8")])
    inner = MergeIterator([newest.scan(None, None), oldest.scan(None, None)])
    it = LsmIterator(inner)
    assert it.is_valid()
    assert (it.key(), it.value()) == (b"w", b"9")
    it.next()
    assert (it.key(), it.value()) == (b"x", b"10")
    it.next()
    assert it.is_valid() is False
    with pytest.raises(RuntimeError):
        it.next()


def test_lsm_iterator_iterates_pairs():
    mt = _table(0, [(b"a", b"1"), (b"b", b"")])
    assert list(LsmIterator(MergeIterator([mt.scan(None, None)]))) == [(b"a", b"1")]