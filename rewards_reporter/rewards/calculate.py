from decimal import Decimal, localcontext
from typing import Collection

from rewards_reporter.models import (
    BalancesByBlock,
    EthereumAddress,
    RewardEntry,
    RewardsCalculationState,
)
from rewards_reporter.rewards.weighted import weighted_average_balance
from rewards_reporter.utils import DECIMAL_PRECISION, address_sort_key, round_half_up


def reward_for_balance(
    average_balance: Decimal, price: Decimal, reward_rate: Decimal = Decimal(1)
) -> int:
    """
    Convert an average balance into reward units.
    :param `price`: price of the reward asset in units of the balance currency
    :param `reward_rate`: fraction of the average balance paid out
    """
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return round_half_up(average_balance * reward_rate / price)


def calculate_rewards(
    balances_by_block: BalancesByBlock,
    from_block: int,
    to_block: int,
    price: Decimal,
    eligible: Collection[EthereumAddress],
    reward_rate: Decimal = Decimal(1),
) -> list[RewardEntry]:
    """
    Compute the reward for every eligible account that held a balance during the window.

    Accounts that are not eligible are skipped whatever their balance,
    as are accounts whose reward rounds down to zero.
    Entries are sorted by address so the merkle tree built from them is reproducible.

    :param `balances_by_block`: snapshots per account, as recorded during the transfer replay
    :param `eligible`: accounts that met the attestation threshold
    """
    rewards: list[RewardEntry] = []
    for address, snapshots in balances_by_block.items():
        if address not in eligible or not snapshots:
            continue
        average = weighted_average_balance(snapshots, from_block, to_block)
        reward = reward_for_balance(average, price, reward_rate)
        if reward > 0:
            rewards.append(RewardEntry(address=address, reward=reward))

    return sorted(rewards, key=lambda r: address_sort_key(r.address))


def calculate_state_rewards(
    state: RewardsCalculationState, reward_rate: Decimal = Decimal(1)
) -> list[RewardEntry]:
    """Calculate rewards straight from a fully replayed state"""
    return calculate_rewards(
        state.balances_by_block,
        state.from_block,
        state.to_block,
        state.price,
        state.eligible_accounts(),
        reward_rate,
    )


def rewards_by_address(rewards: list[RewardEntry]) -> dict[EthereumAddress, str]:
    """The rewards artifact: address -> reward, as strings so big numbers survive json"""
    return {r.address: str(r.reward) for r in rewards}


def total_rewards(rewards: list[RewardEntry]) -> int:
    return sum(r.reward for r in rewards)
