"""
Replays the event logs into a `RewardsCalculationState`.

Replay happens in two stages and the order matters:

1. attestation stage: AttestationCompleted and AccountWalletAddressSet events, in order.
   Eligibility is a final state, so this stage runs to completion first.
2. transfer stage: Transfer events, in order. Wallet associations from stage 1 are used
   to redirect balances, and balances are snapshotted while inside the tracking window.

Running transfers first would credit balances to identifiers that later turn out to
point at a different wallet.
"""

from rewards_reporter.errors import UnknownEventError
from rewards_reporter.models import (
    AccountWalletAddressSet,
    AttestationCompleted,
    ChainEvent,
    RewardsCalculationState,
    Transfer,
)


def ensure_stream(events: list[ChainEvent], allowed: tuple[type, ...], stream: str) -> None:
    """Reject the whole stream up front if it holds an event that does not belong in it"""
    for event in events:
        if not isinstance(event, allowed):
            raise UnknownEventError(f"Unknown event in {stream} events:\n{event}")


def replay_attestations(state: RewardsCalculationState, events: list[ChainEvent]) -> None:
    ensure_stream(events, (AttestationCompleted, AccountWalletAddressSet), "attestation")
    for event in events:
        if isinstance(event, AttestationCompleted):
            state.apply_attestation_completed(event)
        else:
            state.apply_wallet_address_set(event)


def replay_transfers(state: RewardsCalculationState, events: list[ChainEvent]) -> None:
    """
    Apply transfers until the first one past the window.

    - the first transfer at or after `from_block` starts block tracking
    - transfers inside the window are applied and snapshotted
    - the first transfer after `to_block` ends the replay, it and everything after it is skipped
    """
    ensure_stream(events, (Transfer,), "transfer")
    for event in events:
        if event.blockNumber > state.to_block:
            state.stop_tracking()
            break

        if not state.started_tracking and event.blockNumber >= state.from_block:
            state.start_tracking()

        state.apply_transfer(event)


def replay(
    state: RewardsCalculationState,
    attestation_events: list[ChainEvent],
    transfer_events: list[ChainEvent],
) -> RewardsCalculationState:
    """Run both stages against `state`, which is modified in place and returned"""
    replay_attestations(state, attestation_events)
    replay_transfers(state, transfer_events)
    return state
