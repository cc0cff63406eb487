"""Core beacon-chain value types and chain parameters."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

Epoch = int
Slot = int
CommitteeIndex = int
ValidatorIndex = int
RandaoMixIndex = int
Root = bytes
Version = bytes

U64_MAX = 2**64 - 1
FAR_FUTURE_EPOCH = U64_MAX
VALIDATOR_REGISTRY_LIMIT = 2**40
ZERO_ROOT = bytes(32)


def _check_u64(name: str, value: int) -> None:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} out of u64 range: {value}")


def _check_len(name: str, value: bytes, length: int) -> None:
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")


class ForkName(IntEnum):
    """Consensus forks, ordered by activation."""

    BASE = 0
    ALTAIR = 1
    BELLATRIX = 2
    CAPELLA = 3
    DENEB = 4
    ELECTRA = 5
    FULU = 6

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Fork:
    """The fork versions in effect around a fork epoch."""

    previous_version: Version
    current_version: Version
    epoch: Epoch

    def __post_init__(self) -> None:
        _check_len("previous_version", self.previous_version, 4)
        _check_len("current_version", self.current_version, 4)
        _check_u64("epoch", self.epoch)


_MAINNET_FORK_EPOCHS: dict[ForkName, Epoch] = {
    ForkName.BASE: 0,
    ForkName.ALTAIR: 74240,
    ForkName.BELLATRIX: 144896,
    ForkName.CAPELLA: 194048,
    ForkName.DENEB: 269568,
    ForkName.ELECTRA: 364032,
}

_MAINNET_FORK_VERSIONS: dict[ForkName, Version] = {
    ForkName.BASE: bytes.fromhex("00000000"),
    ForkName.ALTAIR: bytes.fromhex("01000000"),
    ForkName.BELLATRIX: bytes.fromhex("02000000"),
    ForkName.CAPELLA: bytes.fromhex("03000000"),
    ForkName.DENEB: bytes.fromhex("04000000"),
    ForkName.ELECTRA: bytes.fromhex("05000000"),
    ForkName.FULU: bytes.fromhex("06000000"),
}


@dataclass
class ChainSpec:
    """Beacon chain parameters; the defaults are those of mainnet."""

    config_name: str | None = "mainnet"
    slots_per_epoch: int = 32
    epochs_per_historical_vector: int = 65536
    shuffle_round_count: int = 90
    target_committee_size: int = 128
    max_committees_per_slot: int = 64
    min_seed_lookahead: Epoch = 1
    max_seed_lookahead: Epoch = 4
    far_future_epoch: Epoch = FAR_FUTURE_EPOCH
    min_activation_balance: int = 32_000_000_000
    effective_balance_increment: int = 1_000_000_000
    churn_limit_quotient: int = 65536
    min_per_epoch_churn_limit_electra: int = 128_000_000_000
    domain_beacon_attester: bytes = bytes.fromhex("01000000")
    fork_epochs: dict[ForkName, Epoch] = field(
        default_factory=lambda: dict(_MAINNET_FORK_EPOCHS)
    )
    fork_versions: dict[ForkName, Version] = field(
        default_factory=lambda: dict(_MAINNET_FORK_VERSIONS)
    )

    def __post_init__(self) -> None:
        self.fork_epochs.setdefault(ForkName.BASE, 0)
        if self.slots_per_epoch <= 0:
            raise ValueError("slots_per_epoch must be positive")

    def fork_name_at_epoch(self, epoch: Epoch) -> ForkName:
        """Return the newest fork scheduled at or before `epoch`."""
        for name in sorted(self.fork_epochs, reverse=True):
            if self.fork_epochs[name] <= epoch:
                return name
        return ForkName.BASE

    def fork_at_epoch(self, epoch: Epoch) -> Fork:
        """Return the `Fork` record that applies at `epoch`."""
        name = self.fork_name_at_epoch(epoch)
        previous = ForkName(name - 1) if name > ForkName.BASE else ForkName.BASE
        return Fork(
            previous_version=self.fork_versions[previous],
            current_version=self.fork_versions[name],
            epoch=self.fork_epochs[name],
        )

    def compute_activation_exit_epoch(self, epoch: Epoch) -> Epoch:
        """Return the epoch at which an activation or exit triggered in `epoch` takes effect."""
        result = epoch + 1 + self.max_seed_lookahead
        if result > U64_MAX:
            raise OverflowError("activation/exit epoch overflows u64")
        return result

    def get_domain(
        self,
        epoch: Epoch,
        domain_type: bytes,
        fork: Fork,
        genesis_validators_root: Root,
    ) -> bytes:
        """Compute the 32-byte signature domain for `domain_type` at `epoch`."""
        _check_len("domain_type", domain_type, 4)
        _check_len("genesis_validators_root", genesis_validators_root, 32)
        version = fork.previous_version if epoch < fork.epoch else fork.current_version
        fork_data_root = hashlib.sha256(
            version.ljust(32, b"\x00") + genesis_validators_root
        ).digest()
        return bytes(domain_type) + fork_data_root[:28]


@dataclass(frozen=True)
class Checkpoint:
    """An (epoch, block root) pair."""

    epoch: Epoch = 0
    root: Root = ZERO_ROOT

    def __post_init__(self) -> None:
        _check_u64("epoch", self.epoch)
        _check_len("root", self.root, 32)
        object.__setattr__(self, "root", bytes(self.root))

    def less_or_equal(self, other: Checkpoint) -> bool:
        """True if this checkpoint is strictly older than `other` or equal to it."""
        return self.epoch < other.epoch or self == other

    def to_dict(self) -> dict[str, Any]:
        return {"epoch": self.epoch, "root": "0x" + self.root.hex()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Checkpoint:
        root = data["root"]
        if isinstance(root, str):
            root = bytes.fromhex(root[2:] if root.startswith("0x") else root)
        return cls(epoch=int(data["epoch"]), root=bytes(root))

    def __str__(self) -> str:
        return f"(0x{self.root.hex()},{self.epoch})"


@dataclass(frozen=True)
class Link:
    """A supermajority link between two checkpoints."""

    source: Checkpoint
    target: Checkpoint

    def __str__(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass
class ValidatorInfo:
    """The validator fields needed for finality verification."""

    pubkey: bytes
    effective_balance: int
    slashed: bool
    activation_eligibility_epoch: Epoch
    activation_epoch: Epoch
    exit_epoch: Epoch

    def is_eligible_for_activation_queue(self, spec: ChainSpec) -> bool:
        """Check if the validator may be placed into the activation queue."""
        return (
            self.activation_eligibility_epoch == spec.far_future_epoch
            and self.effective_balance >= spec.min_activation_balance
        )

    def is_eligible_for_activation(
        self, spec: ChainSpec, finalized_checkpoint_epoch: Epoch
    ) -> bool:
        """Check if the validator is eligible for activation given the finalized epoch."""
        return (
            self.activation_eligibility_epoch <= finalized_checkpoint_epoch
            and self.activation_epoch == spec.far_future_epoch
        )

    def is_active_at(self, epoch: Epoch) -> bool:
        return self.activation_epoch <= epoch < self.exit_epoch