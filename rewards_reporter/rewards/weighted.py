from decimal import Decimal, localcontext

from rewards_reporter.models.types import BlockNumber
from rewards_reporter.utils import DECIMAL_PRECISION


def window_length(from_block: BlockNumber, to_block: BlockNumber) -> int:
    """Both ends of the window are included"""
    return to_block - from_block + 1


def block_weighted_sum(
    snapshots: dict[BlockNumber, int], from_block: BlockNumber, to_block: BlockNumber
) -> int:
    """
    Sum of balance x blocks held across the window.

    Each snapshot's balance is held from its block up to the next snapshot,
    the last one up to and including `to_block`. Blocks before the first snapshot count as zero.
    """
    blocks = sorted(b for b in snapshots if b <= to_block)
    total = 0
    for i, block in enumerate(blocks):
        start = max(block, from_block)
        end = blocks[i + 1] if i + 1 < len(blocks) else to_block + 1
        if end > start:
            total += snapshots[block] * (end - start)
    return total


def weighted_average_balance(
    snapshots: dict[BlockNumber, int], from_block: BlockNumber, to_block: BlockNumber
) -> Decimal:
    """
    Time weighted average of an account's balance over [from_block, to_block].
    Returned unrounded, rounding happens once when the reward is computed.
    """
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(block_weighted_sum(snapshots, from_block, to_block)) / Decimal(
            window_length(from_block, to_block)
        )
