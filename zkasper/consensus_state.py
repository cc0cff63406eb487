"""Casper FFG consensus state and its single-step transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .types import U64_MAX, Checkpoint, Link

_WORD = 32
_STATE_WORDS = 4
_STATE_SIZE = _STATE_WORDS * _WORD


class ConsensusError(Exception):
    """Raised when a consensus state or transition is not acceptable."""


class InvalidStateError(ConsensusError):
    """The checkpoints do not form a valid consensus state."""

    def __init__(self, message: str = "Invalid state") -> None:
        super().__init__(message)


class InvalidTransitionError(ConsensusError):
    """The requested state transition is not a valid FFG step."""

    def __init__(self, message: str = "Invalid state transition") -> None:
        super().__init__(message)


class TwoFinalityError(ConsensusError):
    """The transition would require the unsupported 2-finality rule."""

    def __init__(self, message: str = "2-finality not supported") -> None:
        super().__init__(message)


def _checked_add(a: int, b: int) -> int:
    result = a + b
    if result > U64_MAX:
        raise ConsensusError("Arithmetic error: Overflow")
    return result


def _encode_u64(value: int) -> bytes:
    return value.to_bytes(_WORD, "big")


def _encode_checkpoint(checkpoint: Checkpoint) -> bytes:
    return _encode_u64(checkpoint.epoch) + checkpoint.root


def _decode_u64(word: bytes) -> int:
    if any(word[:-8]):
        raise ValueError("ABI word does not hold a valid uint64")
    return int.from_bytes(word[-8:], "big")


def _decode_checkpoint(data: bytes) -> Checkpoint:
    return Checkpoint(epoch=_decode_u64(data[:_WORD]), root=bytes(data[_WORD : 2 * _WORD]))


@dataclass(frozen=True)
class ConsensusState:
    """The finalized and current justified checkpoints of a Casper FFG chain.

    The previous justified checkpoint is deliberately not tracked, so that
    only 1-finality steps can be verified.
    """

    current_justified_checkpoint: Checkpoint = field(default_factory=Checkpoint)
    finalized_checkpoint: Checkpoint = field(default_factory=Checkpoint)

    def __post_init__(self) -> None:
        if not self.is_valid():
            raise InvalidStateError()

    def is_valid(self) -> bool:
        """True if finalized is strictly older than current justified, or both are zero."""
        if self.finalized_checkpoint.epoch < self.current_justified_checkpoint.epoch:
            return True
        empty = Checkpoint()
        return (
            self.current_justified_checkpoint == empty
            and self.finalized_checkpoint == empty
        )

    def state_transition(self, link: Link) -> ConsensusState:
        """Apply one supermajority link and return the resulting state."""
        source, target = link.source, link.target

        if self.current_justified_checkpoint == source:
            # 1-finality: the source becomes finalized, the target justified.
            if target.epoch == _checked_add(source.epoch, 1):
                return ConsensusState(
                    current_justified_checkpoint=target,
                    finalized_checkpoint=source,
                )
            # Justification only: one or more epochs were skipped.
            if target.epoch > _checked_add(self.current_justified_checkpoint.epoch, 1):
                return ConsensusState(
                    current_justified_checkpoint=target,
                    finalized_checkpoint=self.finalized_checkpoint,
                )

        raise InvalidTransitionError()

    def transition_link(self, other: ConsensusState) -> Link | None:
        """Return the link that moves this state to `other`, or None if they are equal."""
        if not other.is_valid() or not self._less_or_equal(other):
            raise InvalidTransitionError()

        if self.current_justified_checkpoint == other.current_justified_checkpoint:
            if self.finalized_checkpoint != other.finalized_checkpoint:
                raise InvalidTransitionError()
            return None

        target = other.current_justified_checkpoint

        if self.finalized_checkpoint != other.finalized_checkpoint:
            distance = max(0, target.epoch - other.finalized_checkpoint.epoch)
            if (
                other.finalized_checkpoint == self.current_justified_checkpoint
                and distance == 1
            ):
                return Link(source=other.finalized_checkpoint, target=target)
            if distance == 2:
                raise TwoFinalityError()
            raise InvalidTransitionError()

        if max(0, target.epoch - self.current_justified_checkpoint.epoch) <= 1:
            raise InvalidTransitionError()
        return Link(source=self.current_justified_checkpoint, target=target)

    def _less_or_equal(self, other: ConsensusState) -> bool:
        return self.finalized_checkpoint.less_or_equal(
            other.finalized_checkpoint
        ) and self.current_justified_checkpoint.less_or_equal(
            other.current_justified_checkpoint
        )

    @classmethod
    def abi_encoded_size(cls) -> int:
        """Size in bytes of the ABI encoding of a state."""
        return _STATE_SIZE

    def abi_encode(self) -> bytes:
        """Encode as the ABI tuple ``((uint64,bytes32),(uint64,bytes32))``."""
        return _encode_checkpoint(self.current_justified_checkpoint) + _encode_checkpoint(
            self.finalized_checkpoint
        )

    @classmethod
    def abi_decode(cls, data: bytes) -> ConsensusState:
        """Decode a state from its ABI encoding; trailing bytes are ignored."""
        data = bytes(data)
        if len(data) < _STATE_SIZE:
            raise ValueError(
                f"ABI data too short: need {_STATE_SIZE} bytes, got {len(data)}"
            )
        current = _decode_checkpoint(data[: 2 * _WORD])
        finalized = _decode_checkpoint(data[2 * _WORD : 4 * _WORD])
        return cls(current_justified_checkpoint=current, finalized_checkpoint=finalized)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_justified_checkpoint": self.current_justified_checkpoint.to_dict(),
            "finalized_checkpoint": self.finalized_checkpoint.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConsensusState:
        return cls(
            current_justified_checkpoint=Checkpoint.from_dict(
                data["current_justified_checkpoint"]
            ),
            finalized_checkpoint=Checkpoint.from_dict(data["finalized_checkpoint"]),
        )


@dataclass(frozen=True)
class Journal:
    """The public output of a verification: both states and the finalized slot."""

    pre_state: ConsensusState
    post_state: ConsensusState
    finalized_slot: int

    def __post_init__(self) -> None:
        if not 0 <= self.finalized_slot <= U64_MAX:
            raise ValueError(f"finalized_slot out of u64 range: {self.finalized_slot}")

    def encode(self) -> bytes:
        """ABI-encode as ``(State, State, uint64)``."""
        return (
            self.pre_state.abi_encode()
            + self.post_state.abi_encode()
            + _encode_u64(self.finalized_slot)
        )

    def encoded_size(self) -> int:
        return 2 * _STATE_SIZE + _WORD