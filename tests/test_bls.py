import pytest

from zkasper.bls import has_compressed_chunks

PK = bytes(range(1, 49))


def test_matching_chunks():
    assert has_compressed_chunks(PK, PK[:32], PK[32:] + bytes(16))


def test_nonzero_padding_rejected():
    assert not has_compressed_chunks(PK, PK[:32], PK[32:] + b"\x01" + bytes(15))


def test_mismatched_first_chunk():
    assert not has_compressed_chunks(PK, bytes(32), PK[32:] + bytes(16))


def test_mismatched_second_chunk():
    assert not has_compressed_chunks(PK, PK[:32], bytes(32))


def test_wrong_lengths_raise():
    with pytest.raises(ValueError):
        has_compressed_chunks(PK[:47], PK[:32], PK[32:] + bytes(16))
    with pytest.raises(ValueError):
        has_compressed_chunks(PK, PK[:31], PK[32:] + bytes(16))