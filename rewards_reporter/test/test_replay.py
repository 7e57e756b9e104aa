from decimal import Decimal

import pytest

from rewards_reporter.errors import InvalidTransferError, UnknownEventError
from rewards_reporter.models import RewardsCalculationState
from rewards_reporter.replay import replay, replay_attestations, replay_transfers
from rewards_reporter.rewards import calculate_state_rewards, weighted_average_balance
from rewards_reporter.test.conftest import (
    A,
    B,
    C,
    W,
    I1,
    I2,
    attestation,
    mint,
    transfer,
    wallet_set,
)


def test_attestation_stage_rejects_transfers(state):
    with pytest.raises(UnknownEventError, match="attestation events"):
        replay_attestations(state, [attestation(A, I1, 1), mint(A, 1, 2)])


def test_transfer_stage_rejects_attestations(state):
    with pytest.raises(UnknownEventError, match="transfer events"):
        replay_transfers(state, [mint(A, 1, 2), attestation(A, I1, 1)])


def test_transfer_stage_rejects_before_applying_anything(state):
    # the stray event sits after the window, it is still rejected
    events = [mint(A, 1, 2), mint(A, 1, 30), attestation(A, I1, 31)]
    with pytest.raises(UnknownEventError):
        replay_transfers(state, events)
    assert state.balances == {}


def test_tracking_does_not_start_before_window(state):
    replay_transfers(state, [mint(A, 100, 1), mint(A, 100, 9)])

    assert not state.started_tracking
    assert state.balances == {A: 200}
    assert state.balances_by_block == {}


def test_transfer_at_start_block_starts_tracking_and_is_included(state):
    replay_transfers(state, [mint(A, 100, 1), mint(A, 50, 10)])

    assert state.started_tracking
    # the initial snapshot is overwritten by the transfer in the same block
    assert state.balances_by_block == {A: {10: 150}}


def test_transfer_at_end_block_is_included(state):
    replay_transfers(state, [mint(A, 100, 10), transfer(A, B, 40, 20)])

    assert not state.finished_tracking
    assert state.balances_by_block[A] == {10: 100, 20: 60}
    assert state.balances_by_block[B] == {20: 40}


def test_transfer_after_end_block_halts_replay(state):
    events = [mint(A, 100, 10), transfer(A, B, 40, 21), transfer(A, B, 10, 22)]
    replay_transfers(state, events)

    assert state.finished_tracking
    assert state.balances == {A: 100}
    assert state.balances_by_block == {A: {10: 100}}


def test_transfer_after_halt_is_never_checked_for_balance(state):
    # would overdraw, but it comes after the window so it is never applied
    replay_transfers(state, [mint(A, 1, 10), transfer(B, A, 1000, 25)])
    assert state.balances == {A: 1}


def test_window_skipped_entirely_keeps_prior_balances(state):
    replay_transfers(state, [mint(A, 100, 5), mint(A, 100, 30)])

    assert state.started_tracking
    assert state.finished_tracking
    assert state.balances_by_block == {A: {10: 100}}


def test_overdraw_inside_window_raises(state):
    with pytest.raises(InvalidTransferError):
        replay_transfers(state, [mint(A, 10, 11), transfer(A, B, 11, 12)])


def test_worked_example():
    """
    A has two distinct issuers, is minted 100 at block 12 and sends 40 to B at block 20.
    Window [10, 20] is 11 blocks: 0 x 2 + 100 x 8 + 60 x 1 = 860, averaging 78.18...
    B holds a balance but has no attestations.
    """
    state = RewardsCalculationState(
        from_block=10, to_block=20, attestation_threshold=2, price=Decimal("1.0")
    )
    replay(
        state,
        [attestation(A, I1, 10), attestation(A, I2, 11)],
        [mint(A, 100, 12), transfer(A, B, 40, 20)],
    )

    assert state.eligible_accounts() == {A}
    # nothing was held when tracking started, so the first snapshot is the mint
    assert state.balances_by_block[A] == {12: 100, 20: 60}
    assert weighted_average_balance(state.balances_by_block[A], 10, 20) == Decimal(
        860
    ) / Decimal(11)

    rewards = calculate_state_rewards(state)
    assert [(r.address, r.reward) for r in rewards] == [(A, 78)]


def test_wallet_redirection_before_attestation():
    state = RewardsCalculationState(
        from_block=10, to_block=20, attestation_threshold=2, price=Decimal(1)
    )
    replay(
        state,
        [wallet_set(C, W, 1), attestation(C, I1, 2), attestation(C, I2, 3)],
        [mint(C, 100, 5), mint(C, 50, 15)],
    )

    assert C not in state.balances
    assert state.balances == {W: 150}
    assert state.eligible_accounts() == {W}

    rewards = calculate_state_rewards(state)
    # 100 x 5 + 150 x 6 = 1400 / 11
    assert [(r.address, r.reward) for r in rewards] == [(W, 127)]


def test_stage_order_matters_for_wallets():
    """Associations recorded in stage 1 redirect every transfer in stage 2, whatever its block"""
    state = RewardsCalculationState(
        from_block=10, to_block=20, attestation_threshold=1, price=Decimal(1)
    )
    replay(state, [wallet_set(C, W, 50)], [mint(C, 100, 5)])
    assert state.balances == {W: 100}


def test_replay_is_deterministic():
    def run_once():
        state = RewardsCalculationState(
            from_block=10, to_block=20, attestation_threshold=2, price=Decimal(1)
        )
        replay(
            state,
            [attestation(A, I1, 1), attestation(A, I2, 2), attestation(B, I1, 3)],
            [mint(A, 100, 5), transfer(A, B, 30, 12), transfer(B, A, 5, 18)],
        )
        return state.model_dump(mode="json"), calculate_state_rewards(state)

    assert run_once() == run_once()
