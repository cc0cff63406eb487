"""Attestations and the computation of their attesting validators."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from .committee_cache import CommitteeCache
from .types import Checkpoint, CommitteeIndex, Root, Slot, ValidatorIndex

_CHUNK = 32


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _uint64_leaf(value: int) -> bytes:
    return value.to_bytes(8, "little").ljust(_CHUNK, b"\x00")


def _merkleize(chunks: list[bytes]) -> bytes:
    width = 1
    while width < len(chunks):
        width *= 2
    layer = chunks + [bytes(_CHUNK)] * (width - len(chunks))
    while len(layer) > 1:
        layer = [_sha256(left + right) for left, right in zip(layer[::2], layer[1::2])]
    return layer[0]


def _checkpoint_root(checkpoint: Checkpoint) -> bytes:
    return _merkleize([_uint64_leaf(checkpoint.epoch), checkpoint.root])


@dataclass(frozen=True)
class AttestationData:
    """The vote carried by an attestation."""

    slot: Slot
    index: CommitteeIndex
    beacon_block_root: Root
    source: Checkpoint
    target: Checkpoint

    def hash_tree_root(self) -> bytes:
        """Return the SSZ hash tree root of this container."""
        return _merkleize(
            [
                _uint64_leaf(self.slot),
                _uint64_leaf(self.index),
                bytes(self.beacon_block_root),
                _checkpoint_root(self.source),
                _checkpoint_root(self.target),
            ]
        )

    def signing_root(self, domain: bytes) -> bytes:
        """Return the root that is signed under `domain`."""
        if len(domain) != _CHUNK:
            raise ValueError(f"domain must be {_CHUNK} bytes, got {len(domain)}")
        return _merkleize([self.hash_tree_root(), bytes(domain)])


@dataclass(frozen=True)
class Attestation:
    """An aggregated attestation spanning one or more committees of a slot."""

    aggregation_bits: tuple[bool, ...]
    data: AttestationData
    committee_bits: tuple[bool, ...]
    signature: bytes = bytes(96)

    def __post_init__(self) -> None:
        object.__setattr__(self, "aggregation_bits", tuple(map(bool, self.aggregation_bits)))
        object.__setattr__(self, "committee_bits", tuple(map(bool, self.committee_bits)))

    def committee_indices(self) -> list[CommitteeIndex]:
        """Return the indices of the committees this attestation covers."""
        return [i for i, bit in enumerate(self.committee_bits) if bit]


def get_attesting_indices(
    attestation: Attestation, committee_cache: CommitteeCache
) -> list[ValidatorIndex]:
    """Return the sorted validator indices that took part in `attestation`."""
    bits = attestation.aggregation_bits
    attesting: set[ValidatorIndex] = set()
    offset = 0

    for committee_index in attestation.committee_indices():
        if committee_index >= committee_cache.get_committee_count_per_slot():
            raise ValueError(f"committee index out of range: {committee_index}")
        committee = committee_cache.get_beacon_committee(
            attestation.data.slot, committee_index
        )
        if offset + len(committee) > len(bits):
            raise ValueError("aggregation_bits access out of bounds")
        members = {
            validator
            for validator, bit in zip(committee, bits[offset : offset + len(committee)])
            if bit
        }
        if not members:
            raise ValueError("empty committee")
        attesting |= members
        offset += len(committee)

    if len(bits) != offset:
        raise ValueError(
            f"aggregation_bits length {len(bits)} does not match participants {offset}"
        )
    return sorted(attesting)