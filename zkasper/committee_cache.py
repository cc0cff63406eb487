"""Committee shuffling and lookup for a single epoch."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .types import U64_MAX, ChainSpec, CommitteeIndex, Epoch, Slot, ValidatorIndex

_log = logging.getLogger(__name__)

_SEED_SIZE = 32
_MAX_SHUFFLE_LENGTH = 2**40


class CommitteeCacheError(Exception):
    """Raised when committees cannot be computed or looked up."""


@dataclass(frozen=True)
class ShuffleData:
    """Everything needed to compute the shuffling of an epoch."""

    seed: bytes
    indices: Sequence[ValidatorIndex]
    committees_per_slot: int


def shuffle_list(
    indices: Iterable[ValidatorIndex], round_count: int, seed: bytes
) -> list[ValidatorIndex]:
    """Return `indices` permuted by the swap-or-not shuffle.

    Position `i` of the result holds the element that the spec's
    `compute_shuffled_index(i)` selects from the input.
    """
    seed = bytes(seed)
    if len(seed) != _SEED_SIZE:
        raise ValueError(f"seed must be {_SEED_SIZE} bytes, got {len(seed)}")
    if not 0 <= round_count <= 255:
        raise ValueError(f"round count must fit in a byte: {round_count}")

    result = list(indices)
    n = len(result)
    if n > _MAX_SHUFFLE_LENGTH:
        raise ValueError(f"list too long to shuffle: {n}")
    if n < 2:
        return result

    for rnd in reversed(range(round_count)):
        round_seed = seed + bytes([rnd])
        pivot = int.from_bytes(hashlib.sha256(round_seed).digest()[:8], "little") % n
        sources: dict[int, bytes] = {}
        for i in range(n):
            flip = (pivot + n - i) % n
            # Each swap pair is visited once, from its lower end.
            if i >= flip:
                continue
            block = flip // 256
            source = sources.get(block)
            if source is None:
                source = hashlib.sha256(round_seed + block.to_bytes(4, "little")).digest()
                sources[block] = source
            if (source[(flip % 256) // 8] >> (flip % 8)) & 1:
                result[i], result[flip] = result[flip], result[i]
    return result


def get_committee_count_per_slot(active_validator_count: int, spec: ChainSpec) -> int:
    """Return the number of committees in each slot for the given validator count."""
    per_slot = active_validator_count // spec.slots_per_epoch // spec.target_committee_size
    return max(1, min(spec.max_committees_per_slot, per_slot))


@dataclass
class CommitteeCache:
    """The shuffling of one epoch, with lookups of its beacon committees.

    A cache built with no arguments is not initialized and answers no lookups.
    """

    initialized_epoch: Epoch | None = None
    shuffling: tuple[ValidatorIndex, ...] = ()
    committees_per_slot: int = 0
    slots_per_epoch: int = 0
    _positions: dict[ValidatorIndex, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.shuffling = tuple(self.shuffling)
        self._positions = {v: i for i, v in enumerate(self.shuffling)}

    @classmethod
    def initialized(
        cls, spec: ChainSpec, shuffle_data: ShuffleData, epoch: Epoch
    ) -> CommitteeCache:
        """Compute the shuffling for `epoch` and return a ready cache."""
        if shuffle_data.committees_per_slot <= 0:
            raise CommitteeCacheError("Zero slots per epoch")
        indices = list(shuffle_data.indices)
        if not indices:
            raise CommitteeCacheError("Insufficient validators")
        if max(indices) >= U64_MAX:
            raise CommitteeCacheError("Too many validators")

        _log.debug(
            "Computing shuffling: num_active_validators=%d seed=0x%s",
            len(indices),
            bytes(shuffle_data.seed).hex(),
        )
        try:
            shuffling = shuffle_list(indices, spec.shuffle_round_count, shuffle_data.seed)
        except ValueError as err:
            raise CommitteeCacheError("Unable to shuffle") from err

        return cls(
            initialized_epoch=epoch,
            shuffling=tuple(shuffling),
            committees_per_slot=shuffle_data.committees_per_slot,
            slots_per_epoch=spec.slots_per_epoch,
        )

    def is_initialized_at(self, epoch: Epoch) -> bool:
        return self.initialized_epoch is not None and self.initialized_epoch == epoch

    def get_beacon_committee(
        self, slot: Slot, index: CommitteeIndex
    ) -> tuple[ValidatorIndex, ...]:
        """Return the validator indices of committee `index` at `slot`."""
        if self.initialized_epoch is None:
            raise CommitteeCacheError("Cache is not initialized")
        epoch = slot // self.slots_per_epoch
        if not self.is_initialized_at(epoch):
            raise CommitteeCacheError(f"Cache is not initialized at epoch {epoch}")
        if not 0 <= index < self.committees_per_slot:
            raise CommitteeCacheError(f"Shuffle index out of bounds: {index}")

        committee_index = (slot % self.slots_per_epoch) * self.committees_per_slot + index
        committee = self._compute_committee(committee_index)
        if committee is None:
            raise CommitteeCacheError("Unable to shuffle")
        return committee

    def get_beacon_committees_at_slot(
        self, slot: Slot
    ) -> list[tuple[ValidatorIndex, ...]]:
        """Return all committees at `slot`, in ascending committee index order."""
        if self.initialized_epoch is None:
            raise CommitteeCacheError("Cache is not initialized")
        return [
            self.get_beacon_committee(slot, index)
            for index in range(self.get_committee_count_per_slot())
        ]

    def active_validator_count(self) -> int:
        return len(self.shuffling)

    def epoch_committee_count(self) -> int:
        return self.committees_per_slot * self.slots_per_epoch

    def get_committee_count_per_slot(self) -> int:
        return self.committees_per_slot

    def shuffled_position(self, validator_index: ValidatorIndex) -> int | None:
        """Return where `validator_index` sits in the shuffling, or None."""
        return self._positions.get(validator_index)

    def _compute_committee(
        self, index: CommitteeIndex
    ) -> tuple[ValidatorIndex, ...] | None:
        count = self.epoch_committee_count()
        length = len(self.shuffling)
        if count == 0 or index >= count:
            return None
        start = length * index // count
        end = length * (index + 1) // count
        if end > length:
            return None
        return self.shuffling[start:end]