# zkasper

`zkasper` provides the pieces needed to check Casper FFG finality on the
Ethereum beacon chain. You start from a trusted consensus state, made of a
finalized checkpoint and a current justified checkpoint. From there the
package can:

- apply supermajority links to that state;
- compute the committees of an epoch;
- work out which validators took part in an attestation;
- total their effective balance.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `zkasper.types`

- `Checkpoint(epoch, root)` is an epoch with a 32-byte root.
  - `less_or_equal` compares two checkpoints.
  - `to_dict` and `from_dict` convert to and from `{"epoch": ..., "root": "0x..."}`.
- `Link(source, target)` is a supermajority link between two checkpoints.
- `ValidatorInfo` holds a validator's public key, effective balance, slashed flag and epochs. It has these checks:
  - `is_active_at`
  - `is_eligible_for_activation_queue`
  - `is_eligible_for_activation`
- `ForkName` lists the forks in activation order. `Fork` is a fork record.
- `ChainSpec` holds the chain parameters. The defaults are those of mainnet. Its methods are:
  - `fork_name_at_epoch`
  - `fork_at_epoch`
  - `compute_activation_exit_epoch`
  - `get_domain`, which returns a 32-byte signature domain.

### `zkasper.consensus_state`

- `ConsensusState(current_justified_checkpoint, finalized_checkpoint)`:
  - A state is valid when the finalized epoch is strictly below the justified epoch, or when both checkpoints are zero. Constructing an invalid state raises `InvalidStateError`.
  - `state_transition(link)` applies a 1-finality step or a justification-only step. Any other link raises `InvalidTransitionError`.
  - `transition_link(other)` recovers the link between two states. It returns `None` if the states are the same. It raises `TwoFinalityError` for the unsupported 2-finality case.
  - `abi_encode()` and `abi_decode()` read and write the 128-byte Solidity ABI layout. `abi_encoded_size()` gives that size.
  - `to_dict` and `from_dict` convert to and from plain dictionaries.
- `Journal(pre_state, post_state, finalized_slot)` ABI-encodes a verification result as `(State, State, uint64)`.
- All errors derive from `ConsensusError`.

### `zkasper.config`

- `Config` holds:
  - the supported fork range;
  - the epoch lookahead limit;
  - the justification threshold, which is met when `target_balance * quotient >= total_active_balance * factor`.
- `DEFAULT_CONFIG` allows Electra only, with a lookahead of 4 and a threshold of 85/100.

### `zkasper.committee_cache`

- `shuffle_list` implements the swap-or-not shuffle.
- `get_committee_count_per_slot` returns the number of committees in each slot.
- `CommitteeCache.initialized(spec, ShuffleData(...), epoch)` builds the shuffling of an epoch. The cache then serves:
  - `get_beacon_committee(slot, index)`
  - `get_beacon_committees_at_slot`
  - `shuffled_position`
- Failures raise `CommitteeCacheError`.

### `zkasper.attestation`

- `AttestationData` provides SSZ `hash_tree_root` and `signing_root`.
- `Attestation` carries aggregation bits and committee bits.
- `get_attesting_indices(attestation, cache)` returns the sorted indices of the validators that took part in the attestation.

### `zkasper.input_reader`

- `InputReader` is an abstract interface to beacon-state data:
  - validators
  - RANDAO mixes
  - forks
  - attestations
  - block slots
- On top of that interface it derives `get_randao_mix` and `get_seed`.
- `get_total_balance` sums effective balances, with a minimum of one balance increment.

### `zkasper.state_patch`

- `StatePatch` holds validator exits and RANDAO mixes known for a later epoch.
- `is_active_validator` takes patched exits into account.

### `zkasper.bls` and `zkasper.gindices`

- `has_compressed_chunks` checks that a 48-byte compressed public key matches its two SSZ chunks.
- `zkasper.gindices` gives the generalized Merkle indices of the beacon state, beacon block and validator fields.

## Example

```python
from zkasper.types import Checkpoint, Link
from zkasper.consensus_state import ConsensusState, InvalidTransitionError

root = bytes(32)
state = ConsensusState(
    current_justified_checkpoint=Checkpoint(2, root),
    finalized_checkpoint=Checkpoint(0, root),
)

# 1-finality: justify epoch 3 from epoch 2, finalizing epoch 2
new_state = state.state_transition(Link(Checkpoint(2, root), Checkpoint(3, root)))
assert new_state.finalized_checkpoint == Checkpoint(2, root)

# the inverse recovers the link
assert state.transition_link(new_state) == Link(Checkpoint(2, root), Checkpoint(3, root))

# links that do not start at the current justified checkpoint are rejected
try:
    state.state_transition(Link(Checkpoint(1, root), Checkpoint(3, root)))
except InvalidTransitionError:
    pass

encoded = new_state.abi_encode()
assert len(encoded) == ConsensusState.abi_encoded_size()
assert ConsensusState.abi_decode(encoded) == new_state
```

## What it does not do

The package does not verify a batch of attestations end to end. It has:

- no function that groups attestations into links, checks the threshold and applies the resulting transitions;
- no BLS signature verification;
- no verification of SSZ multiproofs;
- no command-line tool;
- no way to fetch beacon-state data from a node.

Those steps must be assembled by the caller from the pieces above, together with an `InputReader` for the caller's data source.