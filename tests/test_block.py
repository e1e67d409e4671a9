import pytest

from minilsm.block import Block, BlockBuilder


def _build(pairs, block_size=4096):
    builder = BlockBuilder(block_size)
    for key, value in pairs:
        assert builder.add(key, value)
    return builder.build()


def test_single_entry_wire_format():
    block = _build([(b"a", b"b")])
    assert block.encode() == b"\x01\x00a\x01\x00b\x00\x00\x01\x00"


def test_offsets_point_at_entry_starts():
    block = _build([(b"a", b"b"), (b"cc", b"dd")])
    assert block.offsets[0] == 0
    assert block.data[block.offsets[1]:].startswith(b"\x02\x00cc")


def test_encode_decode_round_trip():
    block = _build([(b"apple", b"fruit"), (b"banana", b"yellow"), (b"carrot", b"")])
    assert Block.decode(block.encode()) == block


def test_empty_block_round_trip():
    block = Block(b"", [])
    encoded = block.encode()
    assert len(encoded) == 2
    assert Block.decode(encoded) == block


def test_estimated_size_matches_encoded_length():
    builder = BlockBuilder(4096)
    assert builder.estimated_size() == 2
    for key, value in [(b"k1", b"v1"), (b"key2", b"value2"), (b"k3", b"")]:
        builder.add(key, value)
        assert builder.estimated_size() == len(Block(bytes(builder.data), builder.offsets).encode())
    assert builder.estimated_size() == len(builder.build().encode())


def test_add_returns_false_when_full():
    builder = BlockBuilder(20)
    added = 0
    while builder.add(b"a", b"b"):
        added += 1
    assert added >= 1
    assert len(builder.build().encode()) <= 20
    assert len(builder.offsets) == added


def test_first_entry_accepted_even_if_oversized():
    builder = BlockBuilder(4)
    assert builder.add(b"long-key", b"long-value")
    assert not builder.add(b"x", b"y")
    assert len(builder.offsets) == 1


def test_is_empty():
    builder = BlockBuilder(64)
    assert builder.is_empty()
    builder.add(b"a", b"1")
    assert not builder.is_empty()


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        BlockBuilder(64).add(b"", b"value")


def test_build_empty_rejected():
    with pytest.raises(ValueError):
        BlockBuilder(64).build()


def test_oversized_value_rejected():
    with pytest.raises(ValueError):
        BlockBuilder(1 << 20).add(b"k", b"v" * 70000)


@pytest.mark.parametrize("data", [b"", b"\x00", b"\x05\x00"])
def test_decode_truncated_data_raises(data):
    with pytest.raises(ValueError):
        Block.decode(data)