"""Helpers for BLS public keys as stored in SSZ chunks."""

from __future__ import annotations

_ZERO_HALF = bytes(16)


def has_compressed_chunks(public_key_bytes: bytes, chunk1: bytes, chunk2: bytes) -> bool:
    """Check that a 48-byte compressed public key matches its two 32-byte SSZ chunks."""
    if len(public_key_bytes) != 48:
        raise ValueError("compressed public key must be 48 bytes")
    if len(chunk1) != 32 or len(chunk2) != 32:
        raise ValueError("chunks must be 32 bytes")
    return (
        public_key_bytes[:32] == chunk1
        and public_key_bytes[32:48] == chunk2[:16]
        and chunk2[16:32] == _ZERO_HALF
    )