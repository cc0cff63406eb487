"""Generalized Merkle indices of the beacon state and block fields that are read."""

from __future__ import annotations

_U64_MASK = 2**64 - 1
_VALIDATOR_LIST_BASE = 2199023255552


def slot_gindex() -> int:
    """Gindex of `slot` in the beacon state."""
    return 66


def finalized_checkpoint_epoch_gindex() -> int:
    """Gindex of `finalized_checkpoint.epoch` in the beacon state."""
    return 168


def genesis_validators_root_gindex() -> int:
    """Gindex of `genesis_validators_root` in the beacon state."""
    return 65


def fork_previous_version_gindex() -> int:
    """Gindex of `fork.previous_version` in the beacon state."""
    return 268


def fork_current_version_gindex() -> int:
    """Gindex of `fork.current_version` in the beacon state."""
    return 269


def fork_epoch_gindex() -> int:
    """Gindex of `fork.epoch` in the beacon state."""
    return 270


def validators_gindex() -> int:
    """Gindex of `validators` in the beacon state."""
    return 75


def earliest_exit_epoch_gindex() -> int:
    """Gindex of `earliest_exit_epoch` in the beacon state."""
    return 95


def earliest_consolidation_epoch_gindex() -> int:
    """Gindex of `earliest_consolidation_epoch` in the beacon state."""
    return 97


def state_root_gindex() -> int:
    """Gindex of `state_root` in the beacon block."""
    return 11


def block_slot_gindex() -> int:
    """Gindex of `slot` in the beacon block."""
    return 8


def _validator_field_gindex(field: int, i: int) -> int:
    if i < 0:
        raise ValueError(f"validator index must be non-negative: {i}")
    chunk_offset, within_chunk = divmod(field, 8)
    return ((_VALIDATOR_LIST_BASE + i) * 8 * chunk_offset + within_chunk) & _U64_MASK


def public_key_0_gindex(i: int) -> int:
    """Gindex of the first public-key chunk of validator `i`."""
    return _validator_field_gindex(16, i)


def public_key_1_gindex(i: int) -> int:
    """Gindex of the second public-key chunk of validator `i`."""
    return _validator_field_gindex(17, i)


def effective_balance_gindex(i: int) -> int:
    """Gindex of `effective_balance` of validator `i`."""
    return _validator_field_gindex(10, i)


def activation_eligibility_epoch_gindex(i: int) -> int:
    """Gindex of `activation_eligibility_epoch` of validator `i`."""
    return _validator_field_gindex(12, i)


def activation_epoch_gindex(i: int) -> int:
    """Gindex of `activation_epoch` of validator `i`."""
    return _validator_field_gindex(13, i)


def exit_epoch_gindex(i: int) -> int:
    """Gindex of `exit_epoch` of validator `i`."""
    return _validator_field_gindex(14, i)


def slashed_gindex(i: int) -> int:
    """Gindex of `slashed` of validator `i`."""
    return _validator_field_gindex(11, i)