"""Access to the beacon state data needed for verification."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Iterator

from .types import (
    U64_MAX,
    ChainSpec,
    Epoch,
    Fork,
    RandaoMixIndex,
    Root,
    ValidatorIndex,
    ValidatorInfo,
)

if TYPE_CHECKING:
    from .attestation import Attestation
    from .consensus_state import ConsensusState


def _checked_add(a: int, b: int) -> int:
    result = a + b
    if result > U64_MAX:
        raise OverflowError("Arithmetic error: Overflow")
    return result


def _checked_sub(a: int, b: int) -> int:
    result = a - b
    if result < 0:
        raise OverflowError("Arithmetic error: Overflow")
    return result


class InputReader(ABC):
    """Read access to the (partially verified) beacon state and the attestations to process."""

    @abstractmethod
    def chain_spec(self) -> ChainSpec:
        """Return the chain parameters."""

    @abstractmethod
    def genesis_validators_root(self) -> Root:
        """Return `state.genesis_validators_root`."""

    @abstractmethod
    def fork(self, epoch: Epoch) -> Fork:
        """Return `state.fork` at `epoch`."""

    @abstractmethod
    def active_validators(
        self, epoch: Epoch
    ) -> Iterator[tuple[ValidatorIndex, ValidatorInfo]]:
        """Yield the validators active at `epoch`, ordered by index."""

    @abstractmethod
    def randao_mix(self, epoch: Epoch, idx: RandaoMixIndex) -> bytes | None:
        """Return `state.randao_mixes[idx]` as seen at `epoch`, if known."""

    @abstractmethod
    def attestations(self) -> Iterable[Attestation]:
        """Return the attestations to process."""

    @abstractmethod
    def consensus_state(self) -> ConsensusState:
        """Return the trusted consensus state that verification starts from."""

    @abstractmethod
    def slot_for_block(self, block_root: Root) -> int:
        """Return the slot of the block with `block_root`."""

    def get_randao_mix(self, state_epoch: Epoch, epoch: Epoch) -> bytes:
        """Return the RANDAO mix of a recent `epoch` as stored at `state_epoch`."""
        idx = epoch % self.chain_spec().epochs_per_historical_vector
        mix = self.randao_mix(state_epoch, idx)
        if mix is None:
            raise LookupError(f"randao mix {idx} is not present at epoch {state_epoch}")
        return mix

    def get_seed(self, epoch: Epoch, domain_type: bytes) -> bytes:
        """Return the 32-byte seed for `domain_type` at `epoch`."""
        if len(domain_type) != 4:
            raise ValueError(f"domain type must be 4 bytes, got {len(domain_type)}")
        spec = self.chain_spec()
        # The seed uses the RANDAO mix from MIN_SEED_LOOKAHEAD + 1 epochs ago.
        mix_epoch = _checked_sub(
            _checked_sub(
                _checked_add(epoch, spec.epochs_per_historical_vector),
                spec.min_seed_lookahead,
            ),
            1,
        )
        mix = self.get_randao_mix(epoch, mix_epoch)
        return hashlib.sha256(
            bytes(domain_type) + epoch.to_bytes(8, "little") + bytes(mix)
        ).digest()


def get_total_balance(spec: ChainSpec, validators: Iterable[ValidatorInfo]) -> int:
    """Return the combined effective balance, at least one balance increment."""
    total = 0
    for validator in validators:
        total = _checked_add(total, validator.effective_balance)
    return max(total, spec.effective_balance_increment)