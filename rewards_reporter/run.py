from dataclasses import dataclass
from decimal import getcontext
from typing import Optional

from rewards_reporter.chain import get_merkle_root, get_web3
from rewards_reporter.config import create_conf, save_conf
from rewards_reporter.events import load_events
from rewards_reporter.merkle import parse_balance_map
from rewards_reporter.models import (
    ChainEvent,
    Config,
    DB,
    MerkleDistribution,
    RewardEntry,
    RewardsCalculationState,
    RewardSummary,
    VerificationResult,
    Writer,
)
from rewards_reporter.replay import replay
from rewards_reporter.rewards import (
    calculate_state_rewards,
    rewards_by_address,
    total_rewards,
)
from rewards_reporter.utils import DECIMAL_PRECISION
from rewards_reporter.verify import verify_root

# set the context for decimal precision to avoid scientific notation
getcontext().prec = DECIMAL_PRECISION


@dataclass
class RunResult:
    state: RewardsCalculationState
    rewards: list[RewardEntry]
    distribution: Optional[MerkleDistribution]
    summary: RewardSummary
    verification: Optional[VerificationResult] = None


def summarize(
    config: Config,
    state: RewardsCalculationState,
    rewards: list[RewardEntry],
    distribution: Optional[MerkleDistribution],
) -> RewardSummary:
    return RewardSummary(
        name=config.name,
        from_block=state.from_block,
        to_block=state.to_block,
        price=config.price,
        reward_rate=config.reward_rate,
        attestation_threshold=state.attestation_threshold,
        eligible_accounts=len(state.eligible_accounts()),
        recipients=len(rewards),
        total_rewards=str(total_rewards(rewards)),
        merkle_root=distribution.merkleRoot if distribution else None,
    )


def compute(
    config: Config,
    attestation_events: list[ChainEvent],
    transfer_events: list[ChainEvent],
) -> RunResult:
    """
    Replay, calculate rewards and build the tree, entirely in memory.
    Nothing is written here, so any error leaves no partial reports behind.
    """
    state = RewardsCalculationState.from_config(config)
    replay(state, attestation_events, transfer_events)

    rewards = calculate_state_rewards(state, config.reward_rate)

    # an empty distribution can't be claimed from, we still report the replay
    distribution = parse_balance_map(rewards) if len(rewards) > 0 else None

    summary = summarize(config, state, rewards, distribution)
    return RunResult(state, rewards, distribution, summary)


def verify_against_contract(config: Config, result: RunResult) -> None:
    contract = config.verify_against_contract
    if not contract:
        return
    if not result.distribution:
        print(f"⚠️ No merkle root to verify against contract {contract}, skipping verification")
        return
    external_root = get_merkle_root(get_web3(), contract)
    result.verification = verify_root(
        result.distribution.merkleRoot, external_root, source=f"contract {contract}"
    )


def write_reports(config: Config, result: RunResult) -> None:
    writer = Writer(config)
    save_conf(config)

    writer.mapping_to_csv_and_json(
        rewards_by_address(result.rewards), "rewardsByAddress", ("address", "reward")
    )
    writer.to_json(result.state.model_dump(mode="json"), "rewardsCalculationState")
    if result.distribution:
        writer.to_json(result.distribution.model_dump(mode="json"), "merkleTree")
    writer.to_csv_and_json(result.summary.model_dump(mode="json"), "summary")

    db = DB(config, drop=True)
    db.write_run(result.rewards, result.summary, result.distribution, result.verification)
    db.close()


def run(path_to_config: str) -> RunResult:
    """
    Entry point for a full rewards run, orchestrating load, replay, rewards,
    merkle tree, optional verification and the reports.
    """

    # load the configuration file, resolving dates to blocks if needed
    config = create_conf(path_to_config)
    print(f"📆 Tracking balances from block {config.from_block} to {config.to_block}")

    # read every event file before replaying anything
    attestation_events = load_events(config.attestation_events)
    transfer_events = load_events(config.transfer_events)
    print(
        f"📜 Loaded {len(attestation_events)} attestation and {len(transfer_events)} transfer events"
    )

    result = compute(config, attestation_events, transfer_events)
    if result.distribution is None:
        print("⚠️ No account is due a reward, skipping the merkle tree")

    # check the root of a deployed distributor, a mismatch still writes the reports
    verify_against_contract(config, result)

    write_reports(config, result)
    print(
        f"🚀🚀🚀 Rewards for {result.summary.recipients} accounts written to {config.run_dir}"
    )

    if result.verification:
        report_verification(result.verification)

    return result


def report_verification(verification: VerificationResult) -> None:
    if verification.matches:
        print(
            f"✅ Merkle root {verification.external_root} from {verification.source} "
            "matches the generated merkle root"
        )
    else:
        print(
            f"❌ Merkle root {verification.external_root} from {verification.source} "
            f"does not equal generated merkle root {verification.computed_root}"
        )
