"""Unverified look-ahead changes to the beacon state."""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import Epoch, RandaoMixIndex, ValidatorIndex, ValidatorInfo


@dataclass
class StatePatch:
    """RANDAO mixes and validator exit epochs known for a future state."""

    randao_mixes: dict[RandaoMixIndex, bytes] = field(default_factory=dict)
    validator_exits: dict[ValidatorIndex, Epoch] = field(default_factory=dict)

    def is_active_validator(
        self, idx: ValidatorIndex, validator: ValidatorInfo, epoch: Epoch
    ) -> bool:
        """Check if the validator is active at `epoch`, honouring patched exits."""
        exit_epoch = self.validator_exits.get(idx)
        if exit_epoch is not None and epoch >= exit_epoch:
            return False
        return validator.is_active_at(epoch)


EMPTY_STATE_PATCH = StatePatch()