"""Verification configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .types import Epoch, ForkName


@dataclass(frozen=True)
class Config:
    """Limits and thresholds used when verifying finality.

    Justification requires
    ``target_balance * justification_threshold_quotient >=
    total_active_balance * justification_threshold_factor``.
    """

    min_version: ForkName
    max_version: ForkName
    epoch_lookahead_limit: Epoch
    justification_threshold_factor: int
    justification_threshold_quotient: int

    def is_supported_version(self, fork_name: ForkName) -> bool:
        return self.min_version <= fork_name <= self.max_version


DEFAULT_CONFIG = Config(
    min_version=ForkName.ELECTRA,
    max_version=ForkName.ELECTRA,
    epoch_lookahead_limit=4,
    justification_threshold_factor=85,
    justification_threshold_quotient=100,
)