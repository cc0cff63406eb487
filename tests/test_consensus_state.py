import pytest

from zkasper.consensus_state import (
    ConsensusError,
    ConsensusState,
    InvalidStateError,
    InvalidTransitionError,
    Journal,
    TwoFinalityError,
)
from zkasper.types import U64_MAX, Checkpoint, Link


def cp(epoch):
    return Checkpoint(epoch, bytes(32))


def state(cj, fin):
    return ConsensusState(current_justified_checkpoint=cp(cj), finalized_checkpoint=cp(fin))


# (current_justified, finalized), (source, target), (current_justified, finalized)
VALID_CASES = [
    ((2, 0), (2, 3), (3, 2)),
    ((3, 0), (3, 4), (4, 3)),
]

# (current_justified, finalized), (source, target)
INVALID_CASES = [
    ((2, 0), (1, 3)),
    ((3, 0), (2, 4)),
    ((1, 0), (1, 1)),
    ((1, 0), (2, 3)),
    ((2, 0), (1, 3)),
    ((2, 0), (0, 4)),
    ((2, 0), (1, 4)),
    ((2, 0), (1, 2)),
    ((3, 0), (1, 2)),
]


@pytest.mark.parametrize("pre_epochs,link_epochs,expected_epochs", VALID_CASES)
def test_state_transition_valid(pre_epochs, link_epochs, expected_epochs):
    pre_state = ConsensusState(
        current_justified_checkpoint=Checkpoint(pre_epochs[0], bytes(32)),
        finalized_checkpoint=Checkpoint(pre_epochs[1], bytes(32)),
    )
    link = Link(Checkpoint(link_epochs[0], bytes(32)), Checkpoint(link_epochs[1], bytes(32)))
    expected = ConsensusState(
        current_justified_checkpoint=Checkpoint(expected_epochs[0], bytes(32)),
        finalized_checkpoint=Checkpoint(expected_epochs[1], bytes(32)),
    )
    post_state = pre_state.state_transition(link)
    assert post_state == expected
    assert post_state.is_valid()
    assert pre_state.transition_link(post_state) == link


@pytest.mark.parametrize("pre_epochs,link_epochs", INVALID_CASES)
def test_state_transition_invalid(pre_epochs, link_epochs):
    pre_state = ConsensusState(
        current_justified_checkpoint=Checkpoint(pre_epochs[0], bytes(32)),
        finalized_checkpoint=Checkpoint(pre_epochs[1], bytes(32)),
    )
    link = Link(Checkpoint(link_epochs[0], bytes(32)), Checkpoint(link_epochs[1], bytes(32)))
    with pytest.raises(InvalidTransitionError):
        pre_state.state_transition(link)


def test_justification_only_keeps_finalized():
    post = state(2, 0).state_transition(Link(cp(2), cp(5)))
    assert post == state(5, 0)
    assert state(2, 0).transition_link(post) == Link(cp(2), cp(5))


def test_transition_from_default_state():
    post = ConsensusState().state_transition(Link(cp(0), cp(1)))
    assert post == state(1, 0)


def test_transition_overflow_raises():
    pre = state(U64_MAX, 0)
    with pytest.raises(ConsensusError):
        pre.state_transition(Link(cp(U64_MAX), cp(U64_MAX)))


def test_transition_link_identity_is_none():
    assert state(3, 2).transition_link(state(3, 2)) is None


def test_transition_link_two_finality():
    with pytest.raises(TwoFinalityError):
        state(2, 0).transition_link(state(3, 1))


def test_transition_link_changed_finality_without_justification():
    with pytest.raises(InvalidTransitionError):
        state(2, 0).transition_link(state(2, 1))


def test_transition_link_backwards():
    with pytest.raises(InvalidTransitionError):
        state(4, 3).transition_link(state(3, 2))


def test_transition_link_single_step_justification_only_rejected():
    with pytest.raises(InvalidTransitionError):
        state(2, 0).transition_link(state(3, 0))


def test_invalid_state_rejected():
    with pytest.raises(InvalidStateError):
        state(1, 1)
    with pytest.raises(InvalidStateError):
        state(1, 2)


def test_default_state_is_valid():
    default = ConsensusState()
    assert default.is_valid()
    assert default.finalized_checkpoint == Checkpoint()


def test_abi_encoded_size_matches_encoding():
    encoded = state(3, 2).abi_encode()
    assert len(encoded) == ConsensusState.abi_encoded_size()
    assert ConsensusState.abi_encoded_size() == 128


def test_abi_encoding_layout():
    root = bytes(range(32))
    s = ConsensusState(Checkpoint(7, root), Checkpoint(5, bytes(32)))
    encoded = s.abi_encode()
    assert encoded[:32] == (7).to_bytes(32, "big")
    assert encoded[32:64] == root
    assert encoded[64:96] == (5).to_bytes(32, "big")
    assert encoded[96:128] == bytes(32)


@pytest.mark.parametrize("epochs", [None, (3, 2), (U64_MAX, 0)])
def test_abi_round_trip(epochs):
    s = ConsensusState() if epochs is None else state(*epochs)
    assert ConsensusState.abi_decode(s.abi_encode()) == s


def test_abi_decode_ignores_trailing_bytes():
    s = state(4, 3)
    assert ConsensusState.abi_decode(s.abi_encode() + state(9, 8).abi_encode()) == s


def test_abi_decode_invalid_state():
    data = cp(1).epoch.to_bytes(32, "big") + bytes(32) + (2).to_bytes(32, "big") + bytes(32)
    with pytest.raises(InvalidStateError):
        ConsensusState.abi_decode(data)


def test_abi_decode_short_data():
    with pytest.raises(ValueError):
        ConsensusState.abi_decode(bytes(64))


def test_abi_decode_non_u64_word():
    data = bytearray(state(3, 2).abi_encode())
    data[0] = 1
    with pytest.raises(ValueError):
        ConsensusState.abi_decode(bytes(data))


def test_dict_round_trip():
    s = ConsensusState(Checkpoint(6, b"\x11" * 32), Checkpoint(5, b"\x22" * 32))
    d = s.to_dict()
    assert d["current_justified_checkpoint"]["epoch"] == 6
    assert ConsensusState.from_dict(d) == s


def test_journal_encoding():
    pre, post = state(2, 1), state(3, 2)
    journal = Journal(pre, post, 96)
    encoded = journal.encode()
    assert len(encoded) == journal.encoded_size()
    assert encoded[:128] == pre.abi_encode()
    assert encoded[128:256] == post.abi_encode()
    assert encoded[256:] == (96).to_bytes(32, "big")
    assert ConsensusState.abi_decode(encoded[128:]) == post


def test_journal_rejects_out_of_range_slot():
    with pytest.raises(ValueError):
        Journal(state(2, 1), state(3, 2), -1)